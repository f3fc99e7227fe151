from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """An RGB colour with float channels in [0, 1], as the Docs API expects."""

    model_config = ConfigDict(frozen=True)

    red: float = Field(0.0, ge=0.0, le=1.0)
    green: float = Field(0.0, ge=0.0, le=1.0)
    blue: float = Field(0.0, ge=0.0, le=1.0)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        value = value.lstrip("#")
        if len(value) != 6:
            raise ValueError(f"Expected a #RRGGBB colour, got `{value}`")
        r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
        return cls(red=r / 255, green=g / 255, blue=b / 255)

    def to_rgb(self) -> tuple[int, int, int]:
        return round(self.red * 255), round(self.green * 255), round(self.blue * 255)

    def to_hex(self) -> str:
        return "%02X%02X%02X" % self.to_rgb()

    def to_api(self) -> dict:
        return {"color": {"rgbColor": {"red": self.red, "green": self.green, "blue": self.blue}}}

