# Standard library imports
from datetime import datetime
from typing import Any, Dict, List, Optional

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# --------------------------------------------------------------------------
# Resume Builder Data Models
# --------------------------------------------------------------------------

class ContactInfo(BaseModel):
    """Contact details shown in the centered header of the resume."""
    email: Optional[str] = None
    mobile: Optional[str] = None
    linkedin: Optional[str] = Field(None, description="Profile URL, rendered as a [LinkedIn](url) link.")
    twitter: Optional[str] = Field(None, description="Profile URL, rendered as a [Twitter](url) link.")


class Entry(BaseModel):
    """One job, degree or project in a repeatable resume section."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    organization: str = ""
    start_date: str = Field("", alias="startDate", description="Display formatted, e.g. 'Mar 2022'.")
    end_date: str = Field("", alias="endDate", description="Empty when the entry is current.")
    current: bool = False
    description: str = Field("", description="Free text; each non-empty line becomes one bullet.")


class StructuredResume(BaseModel):
    """The form-editable representation of a resume."""
    model_config = ConfigDict(populate_by_name=True)

    contact_info: ContactInfo = Field(default_factory=ContactInfo, alias="contactInfo")
    summary: str = ""
    skills: str = ""
    experience: List[Entry] = Field(default_factory=list)
    education: List[Entry] = Field(default_factory=list)
    projects: List[Entry] = Field(default_factory=list)

    def to_form_data(self) -> Dict[str, Any]:
        """Dump using the camelCase keys the form layer works with."""
        data = self.model_dump(by_alias=True, exclude={"contact_info"})
        data["contactInfo"] = self.contact_info.model_dump(exclude_none=True)
        return data


class SavedResume(BaseModel):
    """The persisted Markdown projection of a user's resume."""
    user_id: str
    content: str
    updated_at: datetime

    def to_response(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "content": self.content,
            "updatedAt": self.updated_at.isoformat(),
        }
