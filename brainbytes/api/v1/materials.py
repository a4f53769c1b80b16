from typing import List

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from brainbytes.schemas.profile import MaterialInput, MaterialDTO
from brainbytes.services.profile import material_store

router = APIRouter()

def _to_dto(m) -> MaterialDTO:
    return MaterialDTO(id=m.id, subject=m.subject, topic=m.topic, content=m.content)

@router.post("/materials", response_model=MaterialDTO, status_code=201)
async def create_material(body: MaterialInput):
    try:
        material = await material_store.add_material(body.subject, body.topic, body.content)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_dto(material)

@router.get("/materials", response_model=List[MaterialDTO])
async def list_materials():
    try:
        materials = await material_store.list_materials()
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return [_to_dto(m) for m in materials]
