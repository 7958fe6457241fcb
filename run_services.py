import asyncio
import uvicorn


async def start_servers():
    config = uvicorn.Config(
        "rental_service.app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=False,
    )
    server = uvicorn.Server(config)
    await server.serve()

if __name__ == "__main__":
    try:
        asyncio.run(start_servers())
    except KeyboardInterrupt:
        print("\nShutting down servers...")
