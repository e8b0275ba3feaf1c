from __future__ import annotations

CATEGORY_LABELS = {
    "RENDA_FIXA_POS": "Renda Fixa Pós",
    "RENDA_FIXA_PRE": "Renda Fixa Pré",
    "RENDA_FIXA_IPCA": "Renda Fixa IPCA",
    "ACOES": "Ações",
    "CRIPTOMOEDAS": "Criptomoedas",
    "IMOVEIS": "Imóveis",
    "CARROS": "Carros",
}

# Categories with month-over-month performance cards and their own chart view
PERFORMANCE_CATEGORIES = ("RENDA_FIXA_POS", "RENDA_FIXA_IPCA", "ACOES")

OVERALL_VIEW = "overall"

CHART_VIEWS = {
    OVERALL_VIEW: {"label": "Geral", "category": None},
    "RENDA_FIXA_POS": {"label": "Renda Fixa Pós", "category": "RENDA_FIXA_POS"},
    "RENDA_FIXA_IPCA": {"label": "Renda Fixa IPCA", "category": "RENDA_FIXA_IPCA"},
    "ACOES": {"label": "Ações", "category": "ACOES"},
}

TX_TOP_UP = "TOP_UP"
TX_WITHDRAW = "WITHDRAW"
TX_KINDS = {TX_TOP_UP, TX_WITHDRAW}

MONTH_ABBREVIATIONS = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)


def category_label(category: str | None) -> str | None:
    if category is None:
        return None
    return CATEGORY_LABELS.get(category, category)
