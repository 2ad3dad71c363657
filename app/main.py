from server import server

# ASGI entry point: uvicorn main:server_app
server_app = server.handler
