from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class MoveRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    power: int


class PokemonRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    ability: Optional[str] = None
    owner: Optional[str] = None
    is_active: bool


class PokemonWithMovesRead(PokemonRead):
    moves: List[MoveRead] = []
