from fastapi import APIRouter, Depends
from typing import Optional, Dict, List
from swimschool.modules.auth.utility import get_current_admin
from swimschool.modules.classes.models import ClassSession
from swimschool.modules.classes.schemas import ClassCreate, ClassUpdate
from swimschool.modules.classes.service import ClassService
from swimschool.modules.classes.dependencies import get_class_service

class_router = APIRouter(prefix="/classes", tags=["Classes"])

@class_router.get("/", response_model=List[ClassSession])
async def get_all_classes(
    class_type: Optional[str] = None,
    skill_level: Optional[str] = None,
    date: Optional[str] = None,
    class_service: ClassService = Depends(get_class_service)
    ):
    return await class_service.get_all_classes(class_type=class_type, skill_level=skill_level, date=date)

@class_router.get("/available", response_model=List[ClassSession])
async def get_available_classes(class_service: ClassService = Depends(get_class_service)):
    return await class_service.get_available_classes()

@class_router.get("/{class_id}", response_model=ClassSession)
async def get_class(
    class_id: str,
    class_service: ClassService = Depends(get_class_service)
    ):
    return await class_service.get_class(class_id)

@class_router.post("/", response_model=ClassSession, status_code=201)
async def create_class(
    data: ClassCreate,
    current_admin: Dict = Depends(get_current_admin),
    class_service: ClassService = Depends(get_class_service)
    ):
    return await class_service.create_class(data)

@class_router.put("/{class_id}", response_model=ClassSession)
async def update_class(
    class_id: str,
    data: ClassUpdate,
    current_admin: Dict = Depends(get_current_admin),
    class_service: ClassService = Depends(get_class_service)
    ):
    return await class_service.update_class(class_id, data)

@class_router.delete("/{class_id}")
async def delete_class(
    class_id: str,
    current_admin: Dict = Depends(get_current_admin),
    class_service: ClassService = Depends(get_class_service)
    ):
    return await class_service.delete_class(class_id)
