import pytest

from pricer_setter.models.catalog import PriceCatalogInput
from pricer_setter.models.module import ModuleClassification
from pricer_setter.pricing import PricingResolver


class ExplodingCatalog:
    def find_exact(self, module_name, complexity_level):
        raise RuntimeError("database is down")

    def find_partial(self, module_name, complexity_level):
        raise AssertionError("should not be reached")


class EmptyCatalog:
    def find_exact(self, module_name, complexity_level):
        return None

    def find_partial(self, module_name, complexity_level):
        return None


def test_exact_match_ignores_case(catalog):
    resolver = PricingResolver(catalog)
    assert resolver.resolve("user authentication", "medium", False) == 190
    assert resolver.resolve("USER AUTHENTICATION", "medium", True) == 90


def test_partial_match_in_both_directions(catalog):
    resolver = PricingResolver(catalog)
    assert resolver.resolve("Auth", "medium", False) == 190
    assert resolver.resolve("User Authentication Module", "medium", False) == 190


def test_exact_match_wins_over_partial(catalog):
    catalog.add_entry(
        PriceCatalogInput(
            module_name="Authentication",
            complexity_level="medium",
            base_price=500,
            student_price=250,
        )
    )
    resolver = PricingResolver(catalog)
    assert resolver.resolve("authentication", "medium", False) == 500


def test_match_requires_same_level(catalog):
    resolver = PricingResolver(catalog)
    # Catalog only prices the medium tier; simple falls through to the default table.
    assert resolver.resolve("User Authentication", "simple", False) == 85


@pytest.mark.parametrize(
    ("level", "is_student", "expected"),
    [
        ("simple", False, 85),
        ("medium", False, 190),
        ("complex", False, 380),
        ("simple", True, 40),
        ("medium", True, 90),
        ("complex", True, 165),
    ],
)
def test_default_prices_when_nothing_matches(catalog, level, is_student, expected):
    resolver = PricingResolver(catalog)
    assert resolver.resolve("Nonexistent Module", level, is_student) == expected


def test_unknown_level_uses_scalar_fallback():
    resolver = PricingResolver(EmptyCatalog())
    assert resolver.resolve("Anything", "extreme", False) == 150
    assert resolver.resolve("Anything", "extreme", True) == 70


def test_lookup_error_is_absorbed():
    resolver = PricingResolver(ExplodingCatalog())
    assert resolver.resolve("Anything", "medium", False) == 150
    assert resolver.resolve("Anything", "medium", True) == 75


def test_price_modules_keeps_order_and_sums_exactly(catalog):
    resolver = PricingResolver(catalog)
    modules = [
        ModuleClassification(name="Reports", level="complex"),
        ModuleClassification(name="User Authentication", level="medium", description="OAuth"),
        ModuleClassification(name="Landing Page", level="simple"),
    ]

    priced = resolver.price_modules(modules, is_student=False)

    assert [module.name for module in priced.modules] == ["Reports", "User Authentication", "Landing Page"]
    assert [module.price for module in priced.modules] == [380, 190, 85]
    assert priced.total == sum(module.price for module in priced.modules)
    assert priced.modules[1].description == "OAuth"
    assert priced.modules[0].description == ""
