from fastapi import HTTPException
from typing import Optional
from datetime import datetime, timezone, timedelta
import logging
from swimschool.modules.classes.repository import ClassRepository
from swimschool.modules.classes.models import ClassSession
from swimschool.modules.classes.schemas import ClassCreate, ClassUpdate

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, class_repo: ClassRepository):
        self.class_repo = class_repo

    async def get_all_classes(
        self,
        class_type: Optional[str] = None,
        skill_level: Optional[str] = None,
        date: Optional[str] = None,
    ):
        query = {"is_active": True}
        if class_type:
            query["class_type"] = class_type
        if skill_level:
            query["skill_level"] = skill_level
        if date:
            try:
                start = datetime.fromisoformat(date)
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid date, expected YYYY-MM-DD")
            start = start.replace(hour=0, minute=0, second=0, microsecond=0)
            query["date"] = {"$gte": start, "$lt": start + timedelta(days=1)}

        classes = await self.class_repo.find_classes(query)
        return [ClassSession(**c) for c in classes]

    async def get_available_classes(self):
        classes = await self.class_repo.find_available_classes(datetime.now(timezone.utc))
        return [ClassSession(**c) for c in classes]

    async def get_class(self, class_id: str) -> ClassSession:
        class_doc = await self.class_repo.find_class(class_id)
        if not class_doc:
            raise HTTPException(status_code=404, detail="Class not found")
        return ClassSession(**class_doc)

    async def create_class(self, data: ClassCreate) -> ClassSession:
        class_session = ClassSession(**data.model_dump())
        await self.class_repo.add_class(class_session)
        logger.info("Created class %s (%s)", class_session.id, class_session.title)
        return class_session

    async def update_class(self, class_id: str, data: ClassUpdate) -> ClassSession:
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            return await self.get_class(class_id)
        update_data["updated_at"] = datetime.now(timezone.utc)

        updated = await self.class_repo.update_class(class_id, update_data)
        if not updated:
            existing = await self.class_repo.find_class(class_id)
            if not existing:
                raise HTTPException(status_code=404, detail="Class not found")
            raise HTTPException(
                status_code=400,
                detail="max_students cannot be lower than the number of registered students",
            )
        return ClassSession(**updated)

    async def delete_class(self, class_id: str):
        if not await self.class_repo.delete_class(class_id):
            raise HTTPException(status_code=404, detail="Class not found")
        logger.info("Deleted class %s", class_id)
        return {"success": True, "message": "Class deleted successfully"}
