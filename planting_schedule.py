"""
Planting schedule module for AgroWeather.

Climate-zone classification by average temperature, per-crop/per-zone
planting windows and growth stages, and a generated twelve-month activity
calendar. The schedule table is declared once as plain data and indexed at
import into immutable dataclasses keyed by (crop, zone).

Month names are full English names ('January' .. 'December'). Unknown month
names never raise: they get index -1, same as a failed list lookup.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

MONTHS = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

# ---------------------------------------------------------------------------
# Climate zones
# ---------------------------------------------------------------------------

CLIMATE_ZONES = {
    'tropical': {
        'name': 'Tropical',
        'temp_range': {'min': 20, 'max': 35},
        'description': 'Hot and humid year-round',
        'growing_season': 'Year-round',
    },
    'subtropical': {
        'name': 'Subtropical',
        'temp_range': {'min': 15, 'max': 30},
        'description': 'Warm with mild winters',
        'growing_season': 'March to November',
    },
    'temperate': {
        'name': 'Temperate',
        'temp_range': {'min': 10, 'max': 25},
        'description': 'Four distinct seasons',
        'growing_season': 'April to October',
    },
    'continental': {
        'name': 'Continental',
        'temp_range': {'min': 5, 'max': 20},
        'description': 'Cold winters, warm summers',
        'growing_season': 'May to September',
    },
}

VALID_ZONES = tuple(CLIMATE_ZONES)


def get_climate_zone(avg_temp_c: float) -> str:
    """Classify an average temperature (°C) into a climate zone key.

    Thresholds are ordered guards, not independent ranges: each lower
    threshold only applies once the ones above it have failed.
    """
    if avg_temp_c >= 25:
        return 'tropical'
    if avg_temp_c >= 20:
        return 'subtropical'
    if avg_temp_c >= 15:
        return 'temperate'
    return 'continental'


# ---------------------------------------------------------------------------
# Schedule types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlantingWindow:
    start: str
    end: str
    optimal: bool
    reason: str

    def contains(self, month: str) -> bool:
        return is_month_in_range(month, self.start, self.end)


@dataclass(frozen=True)
class GrowthStage:
    stage: str
    duration: str
    description: str
    icon: str
    tips: Tuple[str, ...]


@dataclass(frozen=True)
class SeasonalTiming:
    crop: str
    climate_zone: str
    planting_windows: Tuple[PlantingWindow, ...]
    harvest_time: str
    growth_stages: Tuple[GrowthStage, ...]
    frost_considerations: Tuple[str, ...]

    def harvests_in(self, month: str) -> bool:
        # Plain substring test on the free-text harvest description
        return month.lower() in self.harvest_time.lower()

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['growth_stages'] = [dict(s, tips=list(s['tips'])) for s in d['growth_stages']]
        d['planting_windows'] = list(d['planting_windows'])
        d['frost_considerations'] = list(d['frost_considerations'])
        return d


# ---------------------------------------------------------------------------
# Planting schedule table
# windows: (start, end, optimal, reason)
# stages:  (stage, duration, description, icon, [tips])
# ---------------------------------------------------------------------------

_SCHEDULE_DATA = {
    'Rice': {
        'tropical': {
            'windows': [
                ('June', 'July', True, 'Monsoon season provides adequate water'),
                ('November', 'December', False, 'Dry season planting with irrigation'),
            ],
            'harvest_time': 'October-November (Kharif), March-April (Rabi)',
            'stages': [
                ('Seedbed Preparation', '1-2 weeks', 'Prepare nursery beds and soak seeds', '🌱', ['Use certified seeds', 'Treat seeds with fungicide']),
                ('Transplanting', '3-4 weeks', 'Move seedlings to main field', '🌾', ['Maintain 2-3 cm water level', 'Plant 2-3 seedlings per hill']),
                ('Vegetative Growth', '6-8 weeks', 'Tillering and leaf development', '🌿', ['Apply nitrogen fertilizer', 'Control weeds']),
                ('Reproductive Phase', '4-5 weeks', 'Flowering and grain formation', '🌸', ['Maintain water level', 'Monitor for pests']),
                ('Maturation', '3-4 weeks', 'Grain filling and ripening', '🌾', ['Reduce water gradually', 'Prepare for harvest']),
            ],
            'frost': ['No frost risk in tropical zones'],
        },
        'temperate': {
            'windows': [
                ('May', 'June', True, 'Warm weather and adequate water supply'),
            ],
            'harvest_time': 'September-October',
            'stages': [
                ('Seedbed Preparation', '2-3 weeks', 'Prepare nursery beds when soil warms', '🌱', ['Wait for soil temperature >15°C', 'Use cold-tolerant varieties']),
                ('Transplanting', '3-4 weeks', 'Move seedlings after last frost', '🌾', ['Ensure no frost risk', 'Maintain water temperature']),
                ('Vegetative Growth', '8-10 weeks', 'Slower growth in cooler climate', '🌿', ['Monitor temperature', 'Adjust fertilizer timing']),
                ('Reproductive Phase', '5-6 weeks', 'Flowering in summer heat', '🌸', ['Ensure adequate water', 'Watch for heat stress']),
                ('Maturation', '4-5 weeks', 'Harvest before first frost', '🌾', ['Monitor weather forecast', 'Harvest at proper moisture']),
            ],
            'frost': ['Plant after last spring frost', 'Harvest before first fall frost'],
        },
    },
    'Tomato': {
        'tropical': {
            'windows': [
                ('October', 'November', True, 'Cool, dry season ideal for growth'),
                ('January', 'February', False, 'Second season planting'),
            ],
            'harvest_time': 'December-March, April-June',
            'stages': [
                ('Seed Starting', '2-3 weeks', 'Start seeds in protected environment', '🌱', ['Use quality potting mix', 'Maintain 25-30°C temperature']),
                ('Transplanting', '1 week', 'Move seedlings to field', '🌿', ['Harden off seedlings', 'Plant in evening']),
                ('Vegetative Growth', '4-6 weeks', 'Establish root system and foliage', '🌱', ['Provide support stakes', 'Regular watering']),
                ('Flowering', '2-3 weeks', 'First flowers appear', '🌸', ['Avoid overhead watering', 'Monitor for pests']),
                ('Fruit Development', '6-8 weeks', 'Fruits form and ripen', '🍅', ['Consistent watering', 'Harvest regularly']),
            ],
            'frost': ['No frost risk, but avoid extreme heat periods'],
        },
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Start indoors before last frost'),
                ('May', 'June', True, 'Direct sowing after soil warms'),
            ],
            'harvest_time': 'July-October',
            'stages': [
                ('Seed Starting', '6-8 weeks', 'Start indoors 6-8 weeks before last frost', '🌱', ['Use grow lights', 'Maintain 18-24°C']),
                ('Transplanting', '1 week', 'Plant out after last frost', '🌿', ['Harden off for 1 week', 'Soil temp >16°C']),
                ('Vegetative Growth', '6-8 weeks', 'Rapid growth in warm weather', '🌱', ['Mulch around plants', 'Deep, infrequent watering']),
                ('Flowering', '3-4 weeks', 'Flowers appear in summer', '🌸', ['Hand pollinate if needed', 'Remove suckers']),
                ('Fruit Development', '8-12 weeks', 'Continuous harvest until frost', '🍅', ['Pick green tomatoes before frost', 'Support heavy branches']),
            ],
            'frost': ['Start indoors before last frost', 'Harvest all fruits before first frost'],
        },
    },
    'Wheat': {
        'temperate': {
            'windows': [
                ('September', 'October', True, 'Winter wheat - requires cold period'),
                ('March', 'April', False, 'Spring wheat - shorter season'),
            ],
            'harvest_time': 'July-August (Winter), August-September (Spring)',
            'stages': [
                ('Seeding', '1-2 weeks', 'Direct seeding in prepared field', '🌱', ['Proper seed depth 2-3 cm', 'Good seed-to-soil contact']),
                ('Germination', '1-2 weeks', 'Seeds sprout and emerge', '🌿', ['Adequate soil moisture', 'Monitor for pests']),
                ('Tillering', '4-6 weeks', 'Multiple shoots develop', '🌾', ['Apply nitrogen fertilizer', 'Control weeds']),
                ('Stem Extension', '6-8 weeks', 'Plants grow tall and develop heads', '🌾', ['Monitor for diseases', 'Apply fungicides if needed']),
                ('Grain Filling', '4-6 weeks', 'Grains develop and mature', '🌾', ['Avoid water stress', 'Prepare harvest equipment']),
            ],
            'frost': ['Winter wheat needs vernalization', 'Spring wheat planted after frost risk'],
        },
    },
    'Corn': {
        'temperate': {
            'windows': [
                ('April', 'May', True, 'Soil temperature above 10°C'),
                ('June', 'July', False, 'Late planting for shorter season varieties'),
            ],
            'harvest_time': 'August-October',
            'stages': [
                ('Planting', '1 week', 'Direct seeding when soil warms', '🌱', ['Soil temperature >10°C', 'Plant 2-3 cm deep']),
                ('Emergence', '1-2 weeks', 'Seedlings emerge from soil', '🌿', ['Protect from birds', 'Monitor soil moisture']),
                ('Vegetative Growth', '8-10 weeks', 'Rapid growth and leaf development', '🌽', ['Side-dress with nitrogen', 'Control weeds early']),
                ('Tasseling', '2-3 weeks', 'Pollen release and silk emergence', '🌾', ['Ensure adequate water', 'Monitor for corn borer']),
                ('Grain Filling', '6-8 weeks', 'Kernels develop and mature', '🌽', ['Maintain soil moisture', 'Watch for harvest timing']),
            ],
            'frost': ['Plant after last spring frost', 'Harvest before first fall frost'],
        },
    },
    'Onion': {
        'tropical': {
            'windows': [
                ('October', 'November', True, 'Cool, dry season ideal for bulb development'),
                ('January', 'February', False, 'Second planting season'),
            ],
            'harvest_time': 'February-April, May-July',
            'stages': [
                ('Seed Starting', '4-6 weeks', 'Start seeds in nursery beds', '🌱', ['Use well-draining soil', 'Maintain consistent moisture']),
                ('Transplanting', '1 week', 'Move seedlings to main field', '🌿', ['Plant when pencil-thick', 'Space 10-15 cm apart']),
                ('Vegetative Growth', '8-10 weeks', 'Leaf development and early bulbing', '🧅', ['Regular weeding', 'Moderate watering']),
                ('Bulb Development', '6-8 weeks', 'Bulb swelling and maturation', '🧅', ['Reduce watering', 'Stop nitrogen fertilizer']),
                ('Maturation', '2-3 weeks', 'Tops fall over, bulbs cure', '🧅', ['Stop watering', 'Harvest when tops dry']),
            ],
            'frost': ['No frost risk, but avoid extreme heat during bulbing'],
        },
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Spring planting for summer harvest'),
                ('August', 'September', False, 'Fall planting for overwintering varieties'),
            ],
            'harvest_time': 'July-September (Spring planted), June-July (Fall planted)',
            'stages': [
                ('Seed Starting', '10-12 weeks', 'Start indoors in late winter', '🌱', ['Start 10-12 weeks before last frost', 'Keep soil moist']),
                ('Transplanting', '1 week', 'Plant out after soil workable', '🌿', ['Harden off seedlings', 'Plant in cool weather']),
                ('Vegetative Growth', '10-12 weeks', 'Leaf growth in cool weather', '🧅', ['Consistent watering', 'Side-dress with nitrogen']),
                ('Bulb Development', '8-10 weeks', 'Bulbing triggered by day length', '🧅', ['Reduce watering', 'Stop cultivating']),
                ('Maturation', '3-4 weeks', 'Tops fall over and cure', '🧅', ['Stop watering completely', 'Cure in field']),
            ],
            'frost': ['Can tolerate light frost', 'Harvest before hard freeze'],
        },
    },
    'Carrot': {
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Cool spring weather ideal for germination'),
                ('July', 'August', True, 'Fall planting for winter harvest'),
            ],
            'harvest_time': 'June-July (Spring), October-December (Fall)',
            'stages': [
                ('Direct Seeding', '2-3 weeks', 'Sow seeds directly in prepared beds', '🌱', ['Sow thinly', 'Keep soil moist for germination']),
                ('Germination', '2-3 weeks', 'Seeds sprout slowly', '🌿', ['Be patient - can take 3 weeks', 'Thin seedlings when 2 inches tall']),
                ('Vegetative Growth', '8-10 weeks', 'Top growth and root development', '🥕', ['Regular watering', 'Hill soil around shoulders']),
                ('Root Development', '4-6 weeks', 'Carrot root swells and colors', '🥕', ['Consistent moisture', 'Avoid fresh manure']),
                ('Maturation', '2-3 weeks', 'Full size and color development', '🥕', ['Can leave in ground until needed', 'Mulch for winter storage']),
            ],
            'frost': ['Tolerates light frost', 'Sweetens after frost', 'Mulch for winter harvest'],
        },
    },
    'Coffee': {
        'tropical': {
            'windows': [
                ('May', 'July', True, 'Start of rainy season ideal for establishment'),
                ('October', 'November', False, 'Post-harvest planting with irrigation'),
            ],
            'harvest_time': 'October-February (main harvest), April-June (fly harvest)',
            'stages': [
                ('Nursery', '6-8 months', 'Seedling development in shade', '🌱', ['Use shade cloth 50%', 'Regular watering', 'Disease-free seedlings']),
                ('Transplanting', '1 month', 'Move to plantation with shade trees', '☕', ['Plant at start of rains', 'Maintain shade cover', 'Stake young plants']),
                ('Establishment', '18-24 months', 'Root development and vegetative growth', '🌿', ['Gradual shade reduction', 'Regular pruning', 'Weed control']),
                ('First Flowering', '6 months', 'Initial flower and fruit development', '🌸', ['Balanced fertilization', 'Pest monitoring', 'Proper spacing']),
                ('Production', 'Ongoing', 'Annual harvest cycles', '☕', ['Selective picking', 'Post-harvest pruning', 'Soil management']),
            ],
            'frost': ['Cannot tolerate frost', 'Requires elevation 1000-2000m', 'Shade protection essential'],
        },
        'subtropical': {
            'windows': [
                ('March', 'May', True, 'Spring planting before summer heat'),
            ],
            'harvest_time': 'September-December',
            'stages': [
                ('Nursery', '8-10 months', 'Extended nursery period for cooler climate', '🌱', ['Protect from cold', 'Greenhouse cultivation', 'Cold-tolerant varieties']),
                ('Transplanting', '1 month', 'Plant after last frost risk', '☕', ['Wait for soil warming', 'Wind protection', 'Mulch heavily']),
                ('Establishment', '24-30 months', 'Slower growth in cooler conditions', '🌿', ['Frost protection', 'Microclimate management', 'Extended care period']),
                ('First Flowering', '8 months', 'Later flowering due to climate', '🌸', ['Monitor temperature stress', 'Adjust fertilization', 'Disease prevention']),
                ('Production', 'Ongoing', 'Shorter harvest season', '☕', ['Harvest before cold', 'Winter protection', 'Quality focus']),
            ],
            'frost': ['Protect from frost', 'May need greenhouse cultivation', 'Choose cold-tolerant varieties'],
        },
    },
    'Avocado': {
        'tropical': {
            'windows': [
                ('March', 'May', True, 'Before hot season, good root establishment'),
                ('September', 'November', False, 'Post-monsoon planting'),
            ],
            'harvest_time': 'Year-round depending on variety',
            'stages': [
                ('Grafted Sapling', '6-12 months', 'Nursery-grown grafted plants', '🌱', ['Choose disease-resistant rootstock', 'Proper variety selection', 'Gradual hardening']),
                ('Transplanting', '1 month', 'Establish in orchard', '🥑', ['Dig large planting holes', 'Good drainage essential', 'Stake if needed']),
                ('Establishment', '2-3 years', 'Root and canopy development', '🌳', ['Regular watering', 'Mulch around base', 'Prune for shape']),
                ('First Flowering', '6 months', 'Initial flower production', '🌸', ['Cross-pollination important', 'Monitor for pests', 'Balanced nutrition']),
                ('Production', 'Ongoing', 'Annual fruit production', '🥑', ['Harvest at proper maturity', 'Post-harvest care', 'Alternate bearing management']),
            ],
            'frost': ['Sensitive to frost when young', 'Protect first 2-3 years', 'Choose appropriate varieties'],
        },
        'subtropical': {
            'windows': [
                ('March', 'April', True, 'Spring planting for establishment before winter'),
            ],
            'harvest_time': 'February-September depending on variety',
            'stages': [
                ('Grafted Sapling', '8-12 months', 'Cold-hardy rootstock selection', '🌱', ['Choose cold-tolerant varieties', 'Container growing option', 'Frost protection ready']),
                ('Transplanting', '1 month', 'Plant in protected location', '🥑', ['South-facing slope preferred', 'Wind protection', 'Excellent drainage']),
                ('Establishment', '3-4 years', 'Slower growth in cooler climate', '🌳', ['Frost protection systems', 'Microclimate creation', 'Extended care period']),
                ('First Flowering', '8 months', 'Temperature-dependent flowering', '🌸', ['Monitor cold damage', 'Pollination assistance', 'Flower protection']),
                ('Production', 'Ongoing', 'Climate-limited production', '🥑', ['Harvest timing critical', 'Cold storage needs', 'Tree protection']),
            ],
            'frost': ['Requires frost protection', 'Young trees very sensitive', 'May need heated greenhouse'],
        },
    },
    'Banana': {
        'tropical': {
            'windows': [
                ('March', 'May', True, 'Pre-monsoon planting for good establishment'),
                ('September', 'October', False, 'Post-monsoon planting'),
            ],
            'harvest_time': '12-15 months after planting',
            'stages': [
                ('Sucker Planting', '1 month', 'Plant tissue-culture or sword suckers', '🌱', ['Choose healthy planting material', 'Treat with fungicide', 'Proper spacing 2x2m']),
                ('Establishment', '3-4 months', 'Root development and early growth', '🍌', ['Regular watering', 'Weed control', 'Apply organic matter']),
                ('Vegetative Growth', '6-8 months', 'Rapid pseudostem development', '🌿', ['Monthly fertilization', 'Desuckering', 'Pest monitoring']),
                ('Flowering', '2-3 months', 'Flower emergence and fruit setting', '🌸', ['Support heavy bunches', 'Remove male bud', 'Protect from wind']),
                ('Fruit Development', '3-4 months', 'Bunch filling and maturation', '🍌', ['Bunch covering', 'Harvest at 75% maturity', 'Ratoon management']),
            ],
            'frost': ['Cannot tolerate any frost', 'Requires year-round warmth', 'Wind protection important'],
        },
    },
    'Lettuce': {
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Cool spring weather ideal'),
                ('August', 'September', True, 'Fall planting for winter harvest'),
            ],
            'harvest_time': 'May-June (Spring), October-November (Fall)',
            'stages': [
                ('Seed Starting', '2-3 weeks', 'Start indoors or direct sow', '🌱', ['Keep soil moist', 'Cool temperatures 60-65°F', 'Thin seedlings']),
                ('Transplanting', '1 week', 'Move to garden beds', '🥬', ['Harden off seedlings', 'Plant in cool weather', 'Space 6-8 inches apart']),
                ('Vegetative Growth', '4-6 weeks', 'Leaf development and head formation', '🥬', ['Consistent watering', 'Light fertilization', 'Pest monitoring']),
                ('Head Formation', '2-3 weeks', 'Tight head development', '🥬', ['Avoid water stress', 'Harvest before bolting', 'Morning harvest best']),
                ('Harvest', '1-2 weeks', 'Cut at soil level', '🥬', ['Harvest outer leaves first', 'Cut and come again', 'Store in cool place']),
            ],
            'frost': ['Tolerates light frost', 'Protect from hard freeze', 'Row covers helpful'],
        },
        'subtropical': {
            'windows': [
                ('October', 'November', True, 'Cool season crop for winter growing'),
                ('January', 'February', False, 'Late winter planting'),
            ],
            'harvest_time': 'December-February, March-April',
            'stages': [
                ('Seed Starting', '2-3 weeks', 'Cool season establishment', '🌱', ['Shade during hot days', 'Consistent moisture', 'Heat-tolerant varieties']),
                ('Transplanting', '1 week', 'Plant in cooler months', '🥬', ['Evening planting', 'Mulch to keep cool', 'Adequate spacing']),
                ('Vegetative Growth', '5-7 weeks', 'Growth in mild temperatures', '🥬', ['Morning watering', 'Shade cloth if needed', 'Regular feeding']),
                ('Head Formation', '2-4 weeks', 'Head development in cool weather', '🥬', ['Avoid heat stress', 'Harvest before warm weather', 'Succession planting']),
                ('Harvest', '2-3 weeks', 'Extended harvest period', '🥬', ['Early morning harvest', 'Quick cooling', 'Multiple cuttings']),
            ],
            'frost': ['Minimal frost tolerance', 'Protect from unexpected cold', 'Choose appropriate varieties'],
        },
    },
    'Spinach': {
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Cool spring conditions ideal'),
                ('August', 'September', True, 'Fall planting for extended harvest'),
            ],
            'harvest_time': 'May-June (Spring), September-November (Fall)',
            'stages': [
                ('Direct Seeding', '1-2 weeks', 'Sow directly in garden', '🌱', ['Sow every 2 weeks', 'Keep soil moist', 'Cool soil preferred']),
                ('Germination', '1-2 weeks', 'Seeds sprout in cool weather', '🌿', ['Thin to 4-6 inches', 'Protect from heat', 'Consistent moisture']),
                ('Vegetative Growth', '4-6 weeks', 'Leaf development', '🥬', ['Side-dress with nitrogen', 'Harvest outer leaves', 'Prevent bolting']),
                ('Harvest', '2-4 weeks', 'Continuous leaf harvest', '🥬', ['Cut and come again', 'Harvest before flowering', 'Morning picking']),
            ],
            'frost': ['Very frost tolerant', 'Can overwinter with protection', 'Quality improves after light frost'],
        },
    },
    'Pepper': {
        'tropical': {
            'windows': [
                ('March', 'May', True, 'Warm season crop, plant after soil warms'),
                ('August', 'September', False, 'Second season planting'),
            ],
            'harvest_time': 'June-October, November-February',
            'stages': [
                ('Seed Starting', '6-8 weeks', 'Start seeds indoors', '🌱', ['Warm soil 80-85°F', 'Bottom heat helpful', 'Transplant after hardening']),
                ('Transplanting', '1 week', 'Move to field after warm weather', '🌶️', ['Soil temp >65°F', 'Protect from wind', 'Space 18-24 inches']),
                ('Vegetative Growth', '6-8 weeks', 'Plant establishment and growth', '🌿', ['Consistent watering', 'Mulch around plants', 'Support tall varieties']),
                ('Flowering', '4-6 weeks', 'Flower production and fruit set', '🌸', ['Avoid water stress', 'Monitor for pests', 'Hand pollinate if needed']),
                ('Fruit Development', '8-12 weeks', 'Continuous harvest period', '🌶️', ['Regular picking', 'Harvest at desired color', 'Keep plants productive']),
            ],
            'frost': ['Cannot tolerate frost', 'Warm season crop only', 'Protect from cold winds'],
        },
        'temperate': {
            'windows': [
                ('May', 'June', True, 'Plant after last frost when soil is warm'),
            ],
            'harvest_time': 'July-October',
            'stages': [
                ('Seed Starting', '8-10 weeks', 'Start indoors 8-10 weeks before last frost', '🌱', ['Use heat mat', 'Grow lights helpful', 'Harden off gradually']),
                ('Transplanting', '1 week', 'Plant out after soil warms to 65°F', '🌶️', ['Wait for warm weather', 'Use row covers if cool', 'Stake tall varieties']),
                ('Vegetative Growth', '8-10 weeks', 'Slower growth in cooler climate', '🌿', ['Mulch for warmth', 'Protect from cool nights', 'Regular fertilization']),
                ('Flowering', '6-8 weeks', 'Temperature-dependent flowering', '🌸', ['Maintain warm conditions', 'Consistent watering', 'Monitor for diseases']),
                ('Fruit Development', '10-14 weeks', 'Harvest until first frost', '🌶️', ['Pick regularly', 'Harvest green before frost', 'Extend season with protection']),
            ],
            'frost': ['Very frost sensitive', 'Harvest all fruits before frost', 'Use season extenders'],
        },
    },
    'Cucumber': {
        'temperate': {
            'windows': [
                ('May', 'June', True, 'Warm soil and air temperatures needed'),
                ('July', 'July', False, 'Second planting for fall harvest'),
            ],
            'harvest_time': 'July-September',
            'stages': [
                ('Direct Seeding', '1-2 weeks', 'Sow directly when soil is warm', '🌱', ['Soil temp >65°F', 'Plant in hills or rows', 'Keep soil moist']),
                ('Germination', '1 week', 'Quick germination in warm soil', '🌿', ['Thin to best plants', 'Protect from cucumber beetles', 'Provide support']),
                ('Vine Development', '4-6 weeks', 'Rapid vine growth and spreading', '🥒', ['Train on trellises', 'Regular watering', 'Mulch around plants']),
                ('Flowering', '2-3 weeks', 'Male flowers first, then female', '🌸', ['Encourage pollinators', 'Monitor for pests', 'Consistent moisture']),
                ('Fruit Production', '6-8 weeks', 'Continuous harvest period', '🥒', ['Pick daily when ready', 'Keep vines productive', 'Watch for diseases']),
            ],
            'frost': ['Very frost sensitive', 'Plant after all frost danger', 'Harvest before first fall frost'],
        },
        'tropical': {
            'windows': [
                ('October', 'November', True, 'Cool season growing in hot climates'),
                ('February', 'March', False, 'Second season before hot weather'),
            ],
            'harvest_time': 'December-February, April-May',
            'stages': [
                ('Direct Seeding', '1-2 weeks', 'Plant in cooler months', '🌱', ['Avoid extreme heat', 'Provide afternoon shade', 'Consistent watering']),
                ('Germination', '1 week', 'Good germination in moderate temps', '🌿', ['Protect from intense sun', 'Thin appropriately', 'Early pest control']),
                ('Vine Development', '3-5 weeks', 'Faster growth in warm climate', '🥒', ['Provide shade cloth', 'Frequent watering', 'Strong support systems']),
                ('Flowering', '2-3 weeks', 'Heat can affect pollination', '🌸', ['Morning watering', 'Encourage beneficial insects', 'Monitor heat stress']),
                ('Fruit Production', '4-6 weeks', 'Shorter season due to heat', '🥒', ['Harvest frequently', 'Early morning picking', 'Succession planting']),
            ],
            'frost': ['No frost risk', 'Heat is main limiting factor', 'Grow in cooler months'],
        },
    },
    'Beans': {
        'temperate': {
            'windows': [
                ('May', 'June', True, 'Warm soil needed for germination'),
                ('July', 'July', False, 'Second planting for fall harvest'),
            ],
            'harvest_time': 'July-September',
            'stages': [
                ('Direct Seeding', '1-2 weeks', 'Sow directly in warm soil', '🌱', ['Soil temp >60°F', 'Inoculate with rhizobia', 'Plant 1-2 inches deep']),
                ('Germination', '1-2 weeks', 'Quick emergence in warm conditions', '🌿', ['Keep soil moist', 'Protect from birds', 'Thin if overcrowded']),
                ('Vegetative Growth', '4-6 weeks', 'Leaf development and flowering', '🫘', ['Minimal nitrogen needed', 'Support pole varieties', 'Regular watering']),
                ('Pod Development', '3-4 weeks', 'Flower to pod formation', '🫘', ['Consistent moisture', 'Avoid overhead watering', 'Monitor for pests']),
                ('Harvest', '4-6 weeks', 'Continuous picking period', '🫘', ['Pick regularly', 'Harvest young and tender', 'Keep plants productive']),
            ],
            'frost': ['Frost sensitive', 'Plant after last frost', 'Harvest before first frost'],
        },
    },
    'Cabbage': {
        'temperate': {
            'windows': [
                ('March', 'April', True, 'Cool weather crop for spring planting'),
                ('July', 'August', True, 'Fall planting for winter harvest'),
            ],
            'harvest_time': 'June-July (Spring), October-December (Fall)',
            'stages': [
                ('Seed Starting', '4-6 weeks', 'Start indoors for transplanting', '🌱', ['Cool conditions 60-65°F', 'Strong light needed', 'Harden off gradually']),
                ('Transplanting', '1 week', 'Move to garden in cool weather', '🥬', ['Plant in cool weather', 'Space 12-18 inches', 'Firm soil around roots']),
                ('Vegetative Growth', '8-10 weeks', 'Leaf development before heading', '🥬', ['Consistent watering', 'Side-dress with nitrogen', 'Pest monitoring']),
                ('Head Formation', '4-6 weeks', 'Head development and sizing', '🥬', ['Avoid water stress', 'Reduce nitrogen', 'Monitor for splitting']),
                ('Harvest', '2-3 weeks', 'Cut heads when firm', '🥬', ['Harvest before splitting', 'Cut at soil level', 'Store in cool place']),
            ],
            'frost': ['Tolerates moderate frost', 'Quality improves after light frost', 'Protect from hard freeze'],
        },
    },
}

# ---------------------------------------------------------------------------
# Static per-month tables
# ---------------------------------------------------------------------------

MAINTENANCE_ACTIVITIES = {
    'January': ['Plan crop rotation', 'Order seeds', 'Maintain equipment'],
    'February': ['Prepare seedbeds', 'Soil testing', 'Prune fruit trees'],
    'March': ['Start seedlings indoors', 'Apply pre-emergent herbicides', 'Check irrigation systems'],
    'April': ['Transplant seedlings', 'Apply fertilizers', 'Monitor for pests'],
    'May': ['Mulch crops', 'Install support structures', 'Begin regular watering'],
    'June': ['Weed control', 'Monitor plant health', 'Harvest early crops'],
    'July': ['Deep watering', 'Pest management', 'Harvest summer crops'],
    'August': ['Continue harvesting', 'Save seeds', 'Plan fall plantings'],
    'September': ['Plant cover crops', 'Harvest main crops', 'Preserve produce'],
    'October': ['Clean up garden', 'Compost plant debris', 'Plant garlic'],
    'November': ['Protect tender plants', 'Harvest root vegetables', 'Plan next year'],
    'December': ['Review growing records', 'Order catalogs', 'Maintain tools'],
}

# Only tropical and temperate zones carry weather notes
WEATHER_CONSIDERATIONS = {
    'January': {
        'tropical': ['Dry season - increase irrigation', 'Cool temperatures ideal for cool-season crops'],
        'temperate': ['Plan for spring planting', 'Protect plants from frost'],
    },
    'February': {
        'tropical': ['Continue dry season management', 'Prepare for hot season'],
        'temperate': ['Late winter - prepare for spring', 'Watch for late frost'],
    },
    'March': {
        'tropical': ['Hot season begins', 'Increase shade and water'],
        'temperate': ['Spring preparation', 'Soil may still be frozen'],
    },
    'April': {
        'tropical': ['Peak hot season', 'Provide maximum shade'],
        'temperate': ['Spring planting begins', 'Watch for late frost'],
    },
    'May': {
        'tropical': ['Pre-monsoon heat', 'Prepare for rainy season'],
        'temperate': ['Warm spring weather', 'Good planting conditions'],
    },
    'June': {
        'tropical': ['Monsoon season begins', 'Manage excess water'],
        'temperate': ['Early summer', 'Establish watering routine'],
    },
    'July': {
        'tropical': ['Peak monsoon', 'Drainage and disease management'],
        'temperate': ['Hot summer', 'Increase watering frequency'],
    },
    'August': {
        'tropical': ['Continued monsoon', 'Monitor for fungal diseases'],
        'temperate': ['Peak summer heat', 'Provide shade for sensitive crops'],
    },
    'September': {
        'tropical': ['Late monsoon', 'Prepare for post-monsoon season'],
        'temperate': ['Early fall', 'Harvest summer crops'],
    },
    'October': {
        'tropical': ['Post-monsoon', 'Ideal growing conditions return'],
        'temperate': ['Fall season', 'Prepare for frost'],
    },
    'November': {
        'tropical': ['Cool, dry weather', 'Excellent for most crops'],
        'temperate': ['Late fall', 'Harvest before frost'],
    },
    'December': {
        'tropical': ['Peak growing season', 'Optimal conditions'],
        'temperate': ['Winter preparation', 'Protect from freezing'],
    },
}


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

def _build_schedules(data) -> Dict[str, Dict[str, SeasonalTiming]]:
    """Turn the raw schedule table into {crop: {zone: SeasonalTiming}}."""
    schedules = {}
    for crop, zones in data.items():
        schedules[crop] = {}
        for zone, entry in zones.items():
            schedules[crop][zone] = SeasonalTiming(
                crop=crop,
                climate_zone=zone,
                planting_windows=tuple(PlantingWindow(*w) for w in entry['windows']),
                harvest_time=entry['harvest_time'],
                growth_stages=tuple(
                    GrowthStage(stage, duration, description, icon, tuple(tips))
                    for stage, duration, description, icon, tips in entry['stages']
                ),
                frost_considerations=tuple(entry['frost']),
            )
    logger.debug("Indexed planting schedules for %d crops", len(schedules))
    return schedules


PLANTING_SCHEDULES = _build_schedules(_SCHEDULE_DATA)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def _month_index(month: str) -> int:
    try:
        return MONTHS.index(month)
    except ValueError:
        return -1


def is_month_in_range(month: str, start: str, end: str) -> bool:
    """Check whether *month* falls inside the window *start*..*end*.

    Both ends are inclusive. When *start* comes after *end* the window wraps
    the year boundary, e.g. November..February covers Nov, Dec, Jan and Feb.
    """
    month_idx = _month_index(month)
    start_idx = _month_index(start)
    end_idx = _month_index(end)

    if start_idx <= end_idx:
        return start_idx <= month_idx <= end_idx
    return month_idx >= start_idx or month_idx <= end_idx


def get_schedule(crop: str, climate_zone: str) -> Optional[SeasonalTiming]:
    """Return the schedule for (*crop*, *climate_zone*), or None if there is no data."""
    return PLANTING_SCHEDULES.get(crop, {}).get(climate_zone)


def get_crops_for_zone(climate_zone: str) -> List[str]:
    """Crops that have schedule data for *climate_zone*, in table order."""
    return [crop for crop, zones in PLANTING_SCHEDULES.items() if climate_zone in zones]


def _zone_schedules(climate_zone: str):
    for crop, zones in PLANTING_SCHEDULES.items():
        schedule = zones.get(climate_zone)
        if schedule:
            yield crop, schedule


def get_maintenance_activities(month: str, climate_zone: str) -> List[str]:
    # Same list for every zone
    return list(MAINTENANCE_ACTIVITIES.get(month, []))


def get_weather_considerations(month: str, climate_zone: str) -> List[str]:
    return list(WEATHER_CONSIDERATIONS.get(month, {}).get(climate_zone, []))


def generate_monthly_calendar(climate_zone: str) -> List[Dict]:
    """
    Build the twelve-month activity calendar for *climate_zone*.

    Each month lists crops whose planting windows contain it (tagged
    Optimal/Alternative), crops whose harvest text mentions the month name,
    plus the static maintenance and weather notes. Always returns twelve
    entries, January first, even for zones with no crop data.
    """
    calendar = []
    for month in MONTHS:
        planting = []
        harvesting = []

        for crop, schedule in _zone_schedules(climate_zone):
            for window in schedule.planting_windows:
                if window.contains(month):
                    label = '(Optimal)' if window.optimal else '(Alternative)'
                    planting.append(f"{crop} {label}")
            if schedule.harvests_in(month):
                harvesting.append(crop)

        calendar.append({
            'month': month,
            'activities': {
                'planting': planting,
                'harvesting': harvesting,
                'maintenance': get_maintenance_activities(month, climate_zone),
            },
            'weather_considerations': get_weather_considerations(month, climate_zone),
        })
    return calendar


def get_current_planting_recommendations(current_month: str, climate_zone: str) -> Dict:
    """
    What to plant and harvest in *current_month* for *climate_zone*.

    ``plant_now`` gets one entry per matching planting window, so a crop can
    appear more than once. ``plant_soon`` is part of the response shape but is
    never filled in.
    """
    plant_now = []
    plant_soon = []
    harvest_now = []

    for crop, schedule in _zone_schedules(climate_zone):
        for window in schedule.planting_windows:
            if window.contains(current_month):
                plant_now.append({
                    'crop': crop,
                    'reason': window.reason,
                    'optimal': window.optimal,
                })
        if schedule.harvests_in(current_month):
            harvest_now.append(crop)

    return {'plant_now': plant_now, 'plant_soon': plant_soon, 'harvest_now': harvest_now}
