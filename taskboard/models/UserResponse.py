from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    bio: str = ""
    created_at: str

    @classmethod
    def from_doc(cls, doc: dict) -> "UserResponse":
        return cls(
            id=doc["id"],
            name=doc["name"],
            email=doc["email"],
            bio=doc.get("bio", ""),
            created_at=doc["createdAt"],
        )
