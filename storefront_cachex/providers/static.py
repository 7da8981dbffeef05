"""Last-resort catalog data that needs no network."""

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Elektronik",
    "Giyim",
    "Aksesuar",
    "Ev & Yaşam",
    "Kozmetik",
    "Spor",
)


class StaticCategories:
    """Serves the hardcoded default category list; it cannot fail."""

    name = "static"

    def __init__(self, categories: tuple[str, ...] = DEFAULT_CATEGORIES) -> None:
        self.categories = categories

    async def list_categories(self) -> list[str]:
        return list(self.categories)
