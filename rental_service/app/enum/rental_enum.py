from enum import Enum


class PlatformRole(str, Enum):

    airbnb = "airbnb"
    booking = "booking"
    manual = "manual"
    available = "available"


# platforms whose bookings arrive through an iCal feed
EXTERNAL_PLATFORM_ROLES = (PlatformRole.airbnb, PlatformRole.booking)


class OccupancySource(str, Enum):

    manual = "manual"
    airbnb = "airbnb"
    booking = "booking"
