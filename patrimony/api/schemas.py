from pydantic import BaseModel
from typing import Optional, List

class SeriesPoint(BaseModel):
    timestamp: int
    date: str
    value: float
    display_date: str
    display_value: str

class CategoryShare(BaseModel):
    category: str
    label: str
    raw_value: float
    percent: float

class CategoryPerformance(BaseModel):
    category: str
    label: str
    percent_change: Optional[float] = None
    current_value: Optional[float] = None
    delta_value: Optional[float] = None

class Summary(BaseModel):
    total_value: float
    display_total_value: float
    growth_percent: float
    since: Optional[str] = None
    variable_income_percent: Optional[float] = None
    top_category: Optional[CategoryShare] = None
    hidden_categories: List[str] = []

class Dashboard(BaseModel):
    subject: str
    view: str
    view_label: str
    series: List[SeriesPoint]
    includes_hidden_note: bool
    summary: Summary
    distribution: List[CategoryShare]
    visible_distribution: List[CategoryShare]
    performance: List[CategoryPerformance]
