"""
Elevation-based crop recommendations for AgroWeather.

Maps an elevation in meters to one of five fixed elevation zones, each with a
static list of recommended crops. Zone data is built once at import into
immutable dataclasses.

No external dependencies required.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

VALID_CATEGORIES = ('vegetable', 'fruit', 'grain', 'herb', 'flower', 'tree')
VALID_DIFFICULTIES = ('easy', 'moderate', 'hard')

DIFFICULTY_RANK = {'easy': 0, 'moderate': 1, 'hard': 2}


@dataclass(frozen=True)
class CropRecommendation:
    name: str
    icon: str
    category: str
    description: str
    growing_season: str
    difficulty: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ElevationZone:
    """One elevation band. ``min_elevation`` inclusive, ``max_elevation`` exclusive."""
    name: str
    min_elevation: float
    max_elevation: float
    description: str
    climate: str
    crops: Tuple[CropRecommendation, ...]

    def contains(self, elevation_m: float) -> bool:
        return self.min_elevation <= elevation_m < self.max_elevation

    def to_dict(self, include_crops: bool = True) -> Dict:
        d = {
            'name': self.name,
            'min_elevation': self.min_elevation,
            'max_elevation': self.max_elevation,
            'description': self.description,
            'climate': self.climate,
        }
        if include_crops:
            d['crops'] = [c.to_dict() for c in self.crops]
        return d


# ---------------------------------------------------------------------------
# Zone table
# Crop rows: (name, icon, category, description, growing season, difficulty)
# ---------------------------------------------------------------------------

_ZONE_DATA = [
    # ── 0 - 500 m ─────────────────────────────────────────────────────────
    {
        'name': 'Sea Level to Lowlands',
        'min_elevation': 0,
        'max_elevation': 500,
        'description': 'Warm, humid climate with long growing seasons',
        'climate': 'Tropical to Subtropical',
        'crops': [
            ('Rice', '🌾', 'grain', 'Thrives in warm, wet lowland conditions', 'Year-round in tropics', 'moderate'),
            ('Bananas', '🍌', 'fruit', 'Perfect for warm, humid lowlands', 'Year-round', 'easy'),
            ('Coconut', '🥥', 'tree', 'Coastal and lowland tropical tree', 'Year-round', 'moderate'),
            ('Pineapple', '🍍', 'fruit', 'Tropical fruit for warm climates', '18-24 months', 'easy'),
            ('Sugarcane', '🎋', 'grain', 'Warm climate crop', '12-18 months', 'moderate'),
            ('Mango', '🥭', 'fruit', 'Tropical fruit tree', 'Year-round', 'moderate'),
            ('Papaya', '🍈', 'fruit', 'Fast-growing tropical fruit', 'Year-round', 'easy'),
            ('Cacao', '🍫', 'tree', 'Source of chocolate, needs shade', 'Year-round', 'hard'),
            ('Vanilla', '🌿', 'herb', 'Climbing orchid for tropical areas', '3-4 years to harvest', 'hard'),
            ('Cassava', '🥔', 'vegetable', 'Drought-tolerant root crop', '8-12 months', 'easy'),
        ],
    },

    # ── 500 - 1000 m ──────────────────────────────────────────────────────
    {
        'name': 'Low Elevation',
        'min_elevation': 500,
        'max_elevation': 1000,
        'description': 'Moderate climate with warm summers',
        'climate': 'Temperate',
        'crops': [
            ('Tomatoes', '🍅', 'vegetable', 'Versatile warm-season crop', 'Spring to Fall', 'easy'),
            ('Corn', '🌽', 'grain', 'Warm-season staple crop', 'Summer', 'easy'),
            ('Grapes', '🍇', 'fruit', 'Ideal for moderate elevations', 'Spring to Fall', 'moderate'),
            ('Peppers', '🌶️', 'vegetable', 'Heat-loving vegetables', 'Summer', 'easy'),
            ('Strawberries', '🍓', 'fruit', 'Cool-season berry', 'Spring to Summer', 'easy'),
            ('Basil', '🌿', 'herb', 'Warm-season herb', 'Summer', 'easy'),
            ('Avocado', '🥑', 'fruit', 'Subtropical fruit tree, frost-sensitive', 'Year-round', 'moderate'),
            ('Coffee', '☕', 'tree', 'Grows best at 600-1200m elevation', 'Year-round', 'moderate'),
            ('Citrus', '🍊', 'fruit', 'Oranges, lemons, limes thrive here', 'Year-round', 'moderate'),
            ('Olives', '🫒', 'fruit', 'Mediterranean climate tree', 'Year-round', 'moderate'),
            ('Cucumbers', '🥒', 'vegetable', 'Warm-season vine crop', 'Summer', 'easy'),
            ('Watermelon', '🍉', 'fruit', 'Heat-loving summer fruit', 'Summer', 'easy'),
        ],
    },

    # ── 1000 - 2000 m ─────────────────────────────────────────────────────
    {
        'name': 'Mid Elevation',
        'min_elevation': 1000,
        'max_elevation': 2000,
        'description': 'Cool climate with distinct seasons',
        'climate': 'Cool Temperate',
        'crops': [
            ('Potatoes', '🥔', 'vegetable', 'Excellent for cooler climates', 'Spring to Fall', 'easy'),
            ('Wheat', '🌾', 'grain', 'Cool-season grain crop', 'Fall to Summer', 'moderate'),
            ('Apples', '🍎', 'fruit', 'Requires cool winters', 'Spring to Fall', 'moderate'),
            ('Carrots', '🥕', 'vegetable', 'Cool-season root vegetable', 'Spring and Fall', 'easy'),
            ('Cabbage', '🥬', 'vegetable', 'Cold-hardy leafy vegetable', 'Spring and Fall', 'easy'),
            ('Berries', '🫐', 'fruit', 'Blueberries, raspberries thrive here', 'Summer', 'moderate'),
            ('Coffee (Arabica)', '☕', 'tree', 'Premium coffee grows at 1200-1800m', 'Year-round', 'hard'),
            ('Cherries', '🍒', 'fruit', 'Sweet and sour varieties', 'Spring to Summer', 'moderate'),
            ('Broccoli', '🥦', 'vegetable', 'Cool-season brassica', 'Spring and Fall', 'easy'),
            ('Onions', '🧅', 'vegetable', 'Cool-season bulb crop', 'Spring to Fall', 'easy'),
            ('Garlic', '🧄', 'vegetable', 'Plant in fall, harvest in summer', 'Fall to Summer', 'easy'),
            ('Lavender', '💜', 'herb', 'Aromatic herb for dry climates', 'Spring to Fall', 'easy'),
        ],
    },

    # ── 2000 - 3000 m ─────────────────────────────────────────────────────
    {
        'name': 'High Elevation',
        'min_elevation': 2000,
        'max_elevation': 3000,
        'description': 'Cold climate with short growing season',
        'climate': 'Alpine/Subalpine',
        'crops': [
            ('Barley', '🌾', 'grain', 'Hardy grain for high altitudes', 'Short summer', 'moderate'),
            ('Quinoa', '🌾', 'grain', 'Native to high Andes', 'Summer', 'moderate'),
            ('Lettuce', '🥬', 'vegetable', 'Cool-season leafy green', 'Short summer', 'easy'),
            ('Peas', '🫛', 'vegetable', 'Cold-tolerant legume', 'Early summer', 'easy'),
            ('Kale', '🥬', 'vegetable', 'Very cold-hardy green', 'Spring to Fall', 'easy'),
            ('Alpine Flowers', '🌸', 'flower', 'Hardy mountain flowers', 'Short summer', 'moderate'),
            ('Spinach', '🥬', 'vegetable', 'Cold-tolerant leafy green', 'Spring and Fall', 'easy'),
            ('Radishes', '🌱', 'vegetable', 'Fast-growing root vegetable', 'Spring to Fall', 'easy'),
            ('Beets', '🥕', 'vegetable', 'Cold-hardy root crop', 'Spring to Fall', 'easy'),
            ('Rye', '🌾', 'grain', 'Very cold-hardy grain', 'Fall to Summer', 'moderate'),
        ],
    },

    # ── 3000 m and above (catch-all) ──────────────────────────────────────
    {
        'name': 'Very High Elevation',
        'min_elevation': 3000,
        'max_elevation': 5000,
        'description': 'Extreme cold with very short growing season',
        'climate': 'High Alpine',
        'crops': [
            ('Hardy Grains', '🌾', 'grain', 'Only the hardiest grains survive', 'Very short summer', 'hard'),
            ('Root Vegetables', '🥔', 'vegetable', 'Potatoes, turnips in protected areas', 'Short summer', 'hard'),
            ('Alpine Herbs', '🌿', 'herb', 'Hardy mountain herbs', 'Very short', 'hard'),
            ('Greenhouse Crops', '🏠', 'vegetable', 'Most crops need greenhouse protection', 'Extended with protection', 'hard'),
        ],
    },
]


def _build_zones(data) -> Tuple[ElevationZone, ...]:
    zones = []
    for entry in data:
        crops = tuple(CropRecommendation(*row) for row in entry['crops'])
        zones.append(ElevationZone(
            name=entry['name'],
            min_elevation=entry['min_elevation'],
            max_elevation=entry['max_elevation'],
            description=entry['description'],
            climate=entry['climate'],
            crops=crops,
        ))
    return tuple(zones)


ELEVATION_ZONES = _build_zones(_ZONE_DATA)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_zones() -> Tuple[ElevationZone, ...]:
    """Return every elevation zone, lowest first."""
    return ELEVATION_ZONES


def get_crop_recommendations(elevation_m: float) -> Dict:
    """
    Find the elevation zone for *elevation_m* and its crops.

    The first zone whose [min, max) band holds the value wins. Values that
    fall in no band (above the top zone's max, or negative) resolve to the
    highest zone, so this always returns a zone.

    Returns:
        {'zone': ElevationZone, 'recommendations': tuple of CropRecommendation}
    """
    zone = next((z for z in ELEVATION_ZONES if z.contains(elevation_m)), ELEVATION_ZONES[-1])
    return {'zone': zone, 'recommendations': zone.crops}


def get_top_crops(elevation_m: float, count: int = 3) -> List[CropRecommendation]:
    """Return up to *count* crops for the zone, easiest first.

    ``sorted`` is stable, so crops of equal difficulty keep table order.
    """
    recommendations = get_crop_recommendations(elevation_m)['recommendations']
    ranked = sorted(recommendations, key=lambda crop: DIFFICULTY_RANK[crop.difficulty])
    return ranked[:max(count, 0)]


def get_crops_by_category(elevation_m: float, category: str) -> List[CropRecommendation]:
    recommendations = get_crop_recommendations(elevation_m)['recommendations']
    return [crop for crop in recommendations if crop.category == category]


def get_elevation_zone_name(elevation_m: float) -> str:
    return get_crop_recommendations(elevation_m)['zone'].name


def get_climate_description(elevation_m: float) -> str:
    return get_crop_recommendations(elevation_m)['zone'].climate


def is_crop_suitable(crop_name: str, elevation_m: float) -> bool:
    """Case-insensitive exact-name check against the zone's crop list."""
    wanted = crop_name.lower()
    recommendations = get_crop_recommendations(elevation_m)['recommendations']
    return any(crop.name.lower() == wanted for crop in recommendations)
