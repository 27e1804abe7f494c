"""World entities: cities and countries."""
from .city import City, Climate, Coordinates, EconomicClass, Infrastructure, class_for_salary, format_currency
from .country import (
    Country, EconomicLevel, ProductTier, ProductDescriptor, ImportCheck,
    ImportRestriction, Quota, create_country, establish_trade_agreement,
)

__all__ = [
    'City', 'Climate', 'Coordinates', 'EconomicClass', 'Infrastructure', 'class_for_salary', 'format_currency',
    'Country', 'EconomicLevel', 'ProductTier', 'ProductDescriptor', 'ImportCheck',
    'ImportRestriction', 'Quota', 'create_country', 'establish_trade_agreement',
]
