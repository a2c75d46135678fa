"""
Static lookup tables used by the analytics core.

Every table is exposed read-only. Functions in the core take the table they
need as an argument (defaulting to the ones defined here) so that callers can
inject alternative catalogs without touching module state.
"""
from collections import namedtuple
from enum import Enum
from types import MappingProxyType


MethodInfo = namedtuple('MethodInfo', ['efficiency', 'label', 'icon'])
ProductTypeInfo = namedtuple('ProductTypeInfo', ['label', 'default_unit'])
ConsumableTypeInfo = namedtuple('ConsumableTypeInfo', ['label', 'default_grams_per_unit', 'unit'])
MoodDimension = namedtuple('MoodDimension', ['label', 'description', 'lower_is_better'])


class ConsumptionMethod(str, Enum):
    SMOKED = 'Smoked'
    VAPORISED = 'Vaporised'
    EATEN = 'Eaten'
    TINCTURE = 'Tincture'
    TOPICAL = 'Topical'


# Fraction of the THC in the product that actually reaches the user
CONSUMPTION_METHODS = MappingProxyType({
    ConsumptionMethod.SMOKED: MethodInfo(0.2, 'Smoked (20% efficiency)', 'flame'),
    ConsumptionMethod.VAPORISED: MethodInfo(0.4, 'Vaporised (40% efficiency)', 'wind'),
    ConsumptionMethod.EATEN: MethodInfo(0.6, 'Eaten (60% efficiency)', 'cookie'),
    ConsumptionMethod.TINCTURE: MethodInfo(0.5, 'Tincture', 'droplet'),
    ConsumptionMethod.TOPICAL: MethodInfo(0.3, 'Topical', 'hand'),
})

DEFAULT_METHOD_EFFICIENCY = 0.3

# THC percentage assumed for a strain with no lab data
DEFAULT_THC_CONTENT = 20.0

RAW_PRODUCT_TYPES = MappingProxyType({
    'Flower-Buds': ProductTypeInfo('Flower Buds', 'g'),
    'Hash': ProductTypeInfo('Hash', 'g'),
})

CONSUMABLE_TYPES = MappingProxyType({
    'Joints': ConsumableTypeInfo('Joints', 0.6, 'units'),
    'Cartridges': ConsumableTypeInfo('Cartridges', 0.33, 'units'),
    'Edibles': ConsumableTypeInfo('Edibles', 1.0, 'units'),
})

# Used for consumables with no grams_per_unit recorded
DEFAULT_GRAMS_PER_UNIT = 0.5

MOOD_DIMENSIONS = MappingProxyType({
    'energy': MoodDimension('Energy Level', 'How energetic do you feel?', False),
    'happiness': MoodDimension('Happiness', 'How happy/content do you feel?', False),
    'stress': MoodDimension('Stress Level', 'How stressed do you feel?', True),
    'focus': MoodDimension('Focus', 'How well can you concentrate?', False),
    'anxiety': MoodDimension('Anxiety Level', 'How anxious do you feel?', True),
    'pain': MoodDimension('Pain Level', 'How much physical discomfort do you feel?', True),
})

SIDE_EFFECTS = MappingProxyType({
    'dryMouth': 'Dry Mouth',
    'hunger': 'Increased Hunger',
    'redEyes': 'Red Eyes',
    'paranoia': 'Paranoia',
    'anxiety': 'Anxiety',
    'dizziness': 'Dizziness',
    'drowsiness': 'Drowsiness',
    'couchLock': 'Couch lock',
    'giggles': 'Giggles',
    'euphoria': 'Euphoria',
    'relaxation': 'Relaxation',
    'creativity': 'Creativity boost',
    'painRelief': 'Pain relief',
    'nauseaRelief': 'Nausea relief',
})

ENVIRONMENTS = MappingProxyType({
    'home': 'Home',
    'outdoors': 'Outdoors',
    'social': 'Social',
    'work': 'Work',
    "friend's-place": "Friend's place",
    'nature': 'Nature/Park',
    'event': 'Concert/Event',
    'restaurant': 'Restaurant/Bar',
    'car': 'Car',
    'other': 'Other',
})

ACTIVITIES = MappingProxyType({
    'relaxing': 'Relaxing',
    'creative': 'Creative Work',
    'physical': 'Physical Activity',
    'entertainment': 'Entertainment',
    'social': 'Socializing',
    'work': 'Work/Studying',
    'watching': 'Watching TV/Movies',
    'gaming': 'Gaming',
    'reading': 'Reading',
    'cooking': 'Cooking',
    'cleaning': 'Cleaning',
    'music': 'Music',
    'walking': 'Walking',
    'meditation': 'Meditation',
    'sleep': 'Sleep preparation',
    'other': 'Other',
})


def parse_method(value):
    """
    Return the ConsumptionMethod for `value`, or None when it is missing or
    not a known method. Matching is case-insensitive on the method name.
    """
    if value is None:
        return None
    if isinstance(value, ConsumptionMethod):
        return value
    text = str(value).strip().lower()
    for method in ConsumptionMethod:
        if method.value.lower() == text:
            return method
    return None


def method_efficiency(method, methods=CONSUMPTION_METHODS):
    """Delivery efficiency for a method, DEFAULT_METHOD_EFFICIENCY when unknown."""
    info = methods.get(parse_method(method))
    if info is None:
        return DEFAULT_METHOD_EFFICIENCY
    return info.efficiency


def default_grams_per_unit(consumable_type, consumable_types=CONSUMABLE_TYPES):
    info = consumable_types.get(consumable_type)
    if info is None:
        return DEFAULT_GRAMS_PER_UNIT
    return info.default_grams_per_unit
