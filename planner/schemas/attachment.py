from pydantic import BaseModel, ConfigDict

class AttachmentCreate(BaseModel):
    """Métadonnées d'un fichier déjà stocké ailleurs"""
    file_name: str
    file_url: str
    file_size: int
    mime_type: str

class AttachmentResponse(BaseModel):
    id: str
    task_id: str
    file_name: str
    file_url: str
    file_size: int
    mime_type: str
    created_at: int

    model_config = ConfigDict(from_attributes=True)
