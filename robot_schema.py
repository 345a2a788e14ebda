from typing import Dict, Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


DEFAULT_NAME = "Unnamed Robot"
DEFAULT_PURPOSE = "General Purpose"
DEFAULT_SPECIFICATIONS = "No specifications provided."
DEFAULT_CONTROL_LOGIC = "# No control logic generated."


class Component(BaseModel):
    """Hardware component of a robot design; all three fields are required"""
    model_config = ConfigDict(frozen=True, strict=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="Category label, e.g. sensor, actuator")
    description: str = Field(..., min_length=1)

    @field_validator('name', 'type', 'description')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class RobotDesign(BaseModel):
    """Complete robot design as rendered by the UI"""
    model_config = ConfigDict(frozen=True)

    name: str = DEFAULT_NAME
    purpose: str = DEFAULT_PURPOSE
    specifications: str = Field(DEFAULT_SPECIFICATIONS, description="Markdown description of the robot's specs")
    components: Tuple[Component, ...] = ()
    controlLogic: str = Field(DEFAULT_CONTROL_LOGIC, description="Arduino or Python code snippet for basic movement")


class DesignRequest(BaseModel):
    prompt: str


class ImageRequest(BaseModel):
    description: str


class ImageResponse(BaseModel):
    imageUrl: Optional[str] = None


def _text_or_default(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def build_robot_design(data: Dict[str, Any]) -> RobotDesign:
    """
    Build a RobotDesign from a decoded payload, applying field-level defaults.

    Missing, empty or wrong-typed fields get their defaults. A component entry that
    is not an object with non-blank string name/type/description is dropped on its
    own; the remaining components are kept in order.

    Args:
        data: Decoded JSON object

    Returns:
        Fully populated RobotDesign (this step never fails)
    """
    components = []
    raw_components = data.get('components')
    if isinstance(raw_components, list):
        for i, entry in enumerate(raw_components):
            try:
                components.append(Component.model_validate(entry))
            except ValidationError as e:
                print(f"[NORMALIZER] Dropping malformed component at index {i}: {e.error_count()} error(s)")

    return RobotDesign(
        name=_text_or_default(data.get('name'), DEFAULT_NAME),
        purpose=_text_or_default(data.get('purpose'), DEFAULT_PURPOSE),
        specifications=_text_or_default(data.get('specifications'), DEFAULT_SPECIFICATIONS),
        components=tuple(components),
        controlLogic=_text_or_default(data.get('controlLogic'), DEFAULT_CONTROL_LOGIC),
    )


def design_to_payload(design: RobotDesign) -> Dict[str, Any]:
    """Serialize a design into the JSON body shape of /api/generate-design"""
    return design.model_dump(mode="json")


def get_design_example() -> Dict[str, Any]:
    """
    Get an example design payload that conforms to the schema.

    Returns:
        Example robot design JSON
    """
    return {
        "name": "LunarHex",
        "purpose": "cave exploration",
        "specifications": "# Specs\n- Six legs\n- 12 DoF",
        "components": [
            {"name": "LiDAR Unit", "type": "sensor", "description": "360° scanning"}
        ],
        "controlLogic": "move_forward()"
    }
