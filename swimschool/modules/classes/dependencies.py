from fastapi import Depends
from swimschool.modules.classes.repository import ClassRepository
from swimschool.modules.classes.service import ClassService

def get_class_service(
    class_repo: ClassRepository = Depends(),
) -> ClassService:
    return ClassService(class_repo)
