from pydantic import BaseModel


class TaskResponse(BaseModel):
    id: str
    userId: str
    title: str
    description: str = ""
    status: str
    created_at: str

    @classmethod
    def from_doc(cls, doc: dict) -> "TaskResponse":
        return cls(
            id=doc["id"],
            userId=doc["userId"],
            title=doc["title"],
            description=doc.get("description", ""),
            status=doc["status"],
            created_at=doc["createdAt"],
        )
