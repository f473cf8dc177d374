from fastapi import APIRouter
from sql_gateway.api.endpoints import sql

api_router = APIRouter()

# Same endpoints twice: at the root and under the namespaced alias
api_router.include_router(sql.router)
api_router.include_router(sql.router, prefix="/lab5")
