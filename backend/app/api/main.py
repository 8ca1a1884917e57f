from fastapi import APIRouter

from app.api.routes import bot_settings, chats, contacts, dashboard, login, users, utils

api_router = APIRouter()
api_router.include_router(login.router, tags=["login"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(chats.router, prefix="/chats", tags=["chats"])
api_router.include_router(bot_settings.router, prefix="/botsettings", tags=["botsettings"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
