"""Static facet option lists offered alongside the catalog-derived facets."""

CONDITION_OPTIONS = ("new", "used", "refurbished", "open-box")

SHIPPING_OPTIONS = (
    "Free Shipping",
    "Express",
    "Same Day",
    "Local Pickup",
    "International",
)

FEATURE_OPTIONS = (
    "Best Seller",
    "Editor's Choice",
    "Eco-Friendly",
    "Premium Quality",
    "Limited Edition",
    "Exclusive",
    "Trending",
    "Award Winner",
)

AVAILABILITY_OPTIONS = ("In Stock", "Limited Stock", "Pre-Order", "Back Order")

# Availability states that count as purchasable now
IN_STOCK_STATES = frozenset({"In Stock", "Limited Stock"})

SORT_OPTIONS = (
    ("relevance", "Best Match"),
    ("price", "Price"),
    ("rating", "Customer Rating"),
    ("newest", "Newest First"),
    ("popular", "Most Popular"),
    ("discount", "Biggest Discount"),
    ("sales", "Best Selling"),
    ("reviews", "Most Reviewed"),
)

FREE_SHIPPING = "Free Shipping"
