from .properties import Property
from .platforms import Platform
from .bookings import Booking
