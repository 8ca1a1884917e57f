import secrets
import string

from pydantic import BaseModel, Field

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_item_id() -> str:
    """Short client-side identifier for list items; never written to the prompt text."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


class RuleItem(BaseModel):
    id: str = Field(default_factory=new_item_id)
    texto: str = ""


class CompanyInfo(BaseModel):
    acerca: str = Field(default="", description="Free text about the company")
    servicios: list[str] = Field(default_factory=list, description="Ordered list of services")


class BranchInfo(BaseModel):
    """Contact/location record of the business, merged from several prompt sections."""
    id: str = Field(default_factory=new_item_id)
    tag: str = Field(default="", description="Slug used to match the same branch across sections")
    etiqueta: str = Field(default="", description="Display name")
    responsable: str = ""
    telefonos: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    sitio: str = ""
    direccion: str = ""
    horario: str = ""
    enlace: str = ""

    def is_empty(self) -> bool:
        scalars = (
            self.tag,
            self.etiqueta,
            self.responsable,
            self.sitio,
            self.direccion,
            self.horario,
            self.enlace,
        )
        if any(value.strip() for value in scalars):
            return False
        return not any(item.strip() for item in self.telefonos + self.emails)


class ExampleItem(BaseModel):
    id: str = Field(default_factory=new_item_id)
    pregunta: str = ""
    respuesta: str = ""

    def is_empty(self) -> bool:
        return not (self.pregunta.strip() or self.respuesta.strip())


class PromptData(BaseModel):
    """Structured, form-editable view of the chatbot system prompt."""
    role: str = Field(default="", description="Persona of the assistant")
    purpose: str = Field(default="", description="Objective of the assistant")
    core_rules: list[RuleItem] = Field(default_factory=list)
    behavior_rules: list[RuleItem] = Field(default_factory=list)
    negative_prompt: str = ""
    tools: str = ""
    company: CompanyInfo = Field(default_factory=CompanyInfo)
    branches: list[BranchInfo] = Field(default_factory=list)
    examples: list[ExampleItem] = Field(default_factory=list)


def create_empty_prompt_data() -> PromptData:
    return PromptData()
