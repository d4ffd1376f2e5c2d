# src/ec2offering/api/router.py
from fastapi import APIRouter

from ec2offering.api.routes import offerings

api_router = APIRouter(prefix="/api")
api_router.include_router(offerings.router)
