"""
Player profile DTOs returned by GET /api/v1/player/profile.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    WATER = "WATER"
    FOOD = "FOOD"
    ASTERITE = "ASTERITE"      # L1 structure
    LUMINA = "LUMINA"          # L1 energy
    STRATOSIUM = "STRATOSIUM"  # L2 structure
    VOLTARIS = "VOLTARIS"      # L3 energy


class Resource(BaseModel):
    type: ResourceType
    amount: int = Field(default=0, ge=0)


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_id: int = Field(alias="playerId")
    external_uid: str = Field(
        default="",
        alias="externalUid",
        validation_alias=AliasChoices("firebaseUid", "externalUid", "external_uid"),
    )
    email: str = ""
    display_name: str = Field(default="", alias="displayName")
    resources: list[Resource] = Field(default_factory=list)
    created_at: str = Field(default="", alias="createdAt")
    updated_at: str = Field(default="", alias="updatedAt")

    def resource(self, resource_type: ResourceType) -> int:
        """Amount held of `resource_type`, 0 when absent."""
        for entry in self.resources:
            if entry.type == resource_type:
                return entry.amount
        return 0
