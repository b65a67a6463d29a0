from typing import List, Optional

from pydantic import Field

from gallery.schemas.common import CamelModel


class PrintCreateRequest(CamelModel):
    artwork_url: str = Field(..., min_length=1)
    product_types: List[str] = Field(..., min_length=1)
    artwork_title: str = Field(..., min_length=1, max_length=200)
    artwork_id: int


class PrintResult(CamelModel):
    product_type: str
    success: bool
    printful: Optional[str] = None
    printify: Optional[str] = None
    error: Optional[str] = None


class PrintSummary(CamelModel):
    total: int
    successful: int
    failed: int


class PrintCreateResponse(CamelModel):
    success: bool
    message: str
    results: List[PrintResult]
    artwork_id: int
    summary: PrintSummary


class PrintProductType(CamelModel):
    type: str
    name: str
    base_price: float
    description: str
    sizes: List[str]
    recommended: bool


class PrintCatalogResponse(CamelModel):
    product_types: List[PrintProductType]
    total_types: int
    recommended: List[PrintProductType]
