from fastapi import APIRouter
from gastos.api.v1.endpoints import balances, eventos, invitaciones, triggers, usuarios

api_router = APIRouter()

api_router.include_router(eventos.router, prefix="/eventos", tags=["eventos"])
api_router.include_router(invitaciones.router, prefix="/invitaciones", tags=["invitaciones"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(usuarios.router, prefix="/usuarios", tags=["usuarios"])
api_router.include_router(triggers.router, prefix="/triggers", tags=["triggers"])
