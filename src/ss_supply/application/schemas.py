"""Pydantic schemas for ss_supply API responses."""

from pydantic import BaseModel


class CirculatingSupplyResponse(BaseModel):
    circulating_supply: int  # smallest denomination
