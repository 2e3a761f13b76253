"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from liftcheck.schemas.common import Identifier


class VoteCreate(BaseModel):
    """Schema for casting a validation vote on a share."""

    model_config = ConfigDict(populate_by_name=True)

    share_id: Identifier = Field(..., alias="shareId")
    voter_id: Identifier = Field(..., alias="voterId")
    approve: StrictBool = Field(..., description="true to approve the lift, false to reject it")
