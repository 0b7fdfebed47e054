"""
Built-in alias tables for artists, venues and cities.

Keys are lower-case, trimmed aliases; values are canonical names. The tables
are read-only: custom aliases live in `AliasResolver`, never here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ...models import CATEGORIES, Category
from ..matching.normalizer import normalize_for_matching

_ARTIST_ALIASES = {
    # Iconic artists with common abbreviations
    "prince": "Prince",
    "the artist formerly known as prince": "Prince",
    "tafkap": "Prince",
    "symbol": "Prince",
    # Rock
    "gnr": "Guns N' Roses",
    "guns n roses": "Guns N' Roses",
    "guns and roses": "Guns N' Roses",
    "rhcp": "Red Hot Chili Peppers",
    "red hot chilli peppers": "Red Hot Chili Peppers",
    "chili peppers": "Red Hot Chili Peppers",
    "acdc": "AC/DC",
    "ac dc": "AC/DC",
    "led zep": "Led Zeppelin",
    "zeppelin": "Led Zeppelin",
    "pink floyd": "Pink Floyd",
    "floyd": "Pink Floyd",
    "the stones": "The Rolling Stones",
    "rolling stones": "The Rolling Stones",
    "fab four": "The Beatles",
    "beatles": "The Beatles",
    "ccr": "Creedence Clearwater Revival",
    "creedence": "Creedence Clearwater Revival",
    "elo": "Electric Light Orchestra",
    "rem": "R.E.M.",
    "bto": "Bachman-Turner Overdrive",
    "the boss": "Bruce Springsteen",
    "springsteen": "Bruce Springsteen",
    # Hip-hop
    "eminem": "Eminem",
    "slim shady": "Eminem",
    "marshall mathers": "Eminem",
    "jay z": "Jay-Z",
    "jay-z": "Jay-Z",
    "hov": "Jay-Z",
    "biggie": "The Notorious B.I.G.",
    "notorious big": "The Notorious B.I.G.",
    "biggie smalls": "The Notorious B.I.G.",
    "tupac": "2Pac",
    "2pac": "2Pac",
    "makaveli": "2Pac",
    "atcq": "A Tribe Called Quest",
    "wu tang": "Wu-Tang Clan",
    # Pop
    "madonna": "Madonna",
    "material girl": "Madonna",
    "queen of pop": "Madonna",
    "mj": "Michael Jackson",
    "king of pop": "Michael Jackson",
    "the king": "Elvis Presley",
    "elvis": "Elvis Presley",
    "t swift": "Taylor Swift",
    "tswift": "Taylor Swift",
    # Electronic / dance
    "daft punk": "Daft Punk",
    "robots": "Daft Punk",
    "deadmau5": "deadmau5",
    "the mouse": "deadmau5",
    "lcd": "LCD Soundsystem",
    # Alternative / indie
    "radiohead": "Radiohead",
    "the bends": "Radiohead",
    "nirvana": "Nirvana",
    "smells like teen spirit": "Nirvana",
    "foo fighters": "Foo Fighters",
    "foos": "Foo Fighters",
    "qotsa": "Queens of the Stone Age",
    "ratm": "Rage Against the Machine",
    "nin": "Nine Inch Nails",
    # R&B / soul
    "beyonce": "Beyoncé",
    "queen b": "Beyoncé",
    "sasha fierce": "Beyoncé",
    "aretha": "Aretha Franklin",
    "queen of soul": "Aretha Franklin",
    # Country
    "dolly": "Dolly Parton",
    "johnny cash": "Johnny Cash",
    "man in black": "Johnny Cash",
    # Jazz / blues
    "miles": "Miles Davis",
    "bb king": "B.B. King",
    "king of blues": "B.B. King",
    # Classical
    "beethoven": "Ludwig van Beethoven",
    "mozart": "Wolfgang Amadeus Mozart",
    "bach": "Johann Sebastian Bach",
}

_VENUE_ALIASES = {
    # Iconic venues
    "msg": "Madison Square Garden",
    "the garden": "Madison Square Garden",
    "madison sq garden": "Madison Square Garden",
    "radio city": "Radio City Music Hall",
    "carnegie": "Carnegie Hall",
    "carnegie hall": "Carnegie Hall",
    # Theaters
    "apollo": "Apollo Theater",
    "apollo theater": "Apollo Theater",
    "beacon": "Beacon Theatre",
    "beacon theater": "Beacon Theatre",
    "beacon theatre": "Beacon Theatre",
    "lincoln center": "Lincoln Center",
    "the ryman": "Ryman Auditorium",
    "ryman": "Ryman Auditorium",
    "the fillmore": "The Fillmore",
    "fillmore": "The Fillmore",
    # Arenas and stadiums
    "yankee stadium": "Yankee Stadium",
    "the stadium": "Yankee Stadium",
    "citi field": "Citi Field",
    "shea": "Shea Stadium",
    "shea stadium": "Shea Stadium",
    "barclays": "Barclays Center",
    "barclays center": "Barclays Center",
    # Concert venues
    "bowery ballroom": "Bowery Ballroom",
    "mercury lounge": "Mercury Lounge",
    "webster hall": "Webster Hall",
    "terminal 5": "Terminal 5",
    "t5": "Terminal 5",
    "hammerstein": "Hammerstein Ballroom",
    "hammerstein ballroom": "Hammerstein Ballroom",
    # Clubs
    "cbgb": "CBGB",
    "cbgbs": "CBGB",
    "blue note": "Blue Note",
    "village vanguard": "Village Vanguard",
    "vanguard": "Village Vanguard",
    # International
    "royal albert hall": "Royal Albert Hall",
    "albert hall": "Royal Albert Hall",
    "rah": "Royal Albert Hall",
    "wembley": "Wembley Stadium",
    "wembley stadium": "Wembley Stadium",
    "o2": "The O2 Arena",
    "o2 arena": "The O2 Arena",
    "red rocks": "Red Rocks Amphitheatre",
    "red rocks amphitheatre": "Red Rocks Amphitheatre",
    "hollywood bowl": "Hollywood Bowl",
    "the bowl": "Hollywood Bowl",
    "paradiso": "Paradiso",
    "olympia": "L'Olympia",
}

_CITY_ALIASES = {
    # United States
    "nyc": "New York City",
    "ny": "New York City",
    "new york": "New York City",
    "manhattan": "New York City",
    "the big apple": "New York City",
    "gotham": "New York City",
    "la": "Los Angeles",
    "los angeles": "Los Angeles",
    "city of angels": "Los Angeles",
    "hollywood": "Los Angeles",
    "sf": "San Francisco",
    "san fran": "San Francisco",
    "frisco": "San Francisco",
    "the city": "San Francisco",
    "chi": "Chicago",
    "chicago": "Chicago",
    "windy city": "Chicago",
    "chi-town": "Chicago",
    "vegas": "Las Vegas",
    "las vegas": "Las Vegas",
    "sin city": "Las Vegas",
    "miami": "Miami",
    "the magic city": "Miami",
    "south beach": "Miami",
    "dc": "Washington, D.C.",
    "washington dc": "Washington, D.C.",
    "washington": "Washington, D.C.",
    "philly": "Philadelphia",
    "philadelphia": "Philadelphia",
    "city of brotherly love": "Philadelphia",
    "boston": "Boston",
    "beantown": "Boston",
    "detroit": "Detroit",
    "motor city": "Detroit",
    "motown": "Detroit",
    "nashville": "Nashville",
    "music city": "Nashville",
    "nola": "New Orleans",
    "new orleans": "New Orleans",
    "the big easy": "New Orleans",
    "atl": "Atlanta",
    "atlanta": "Atlanta",
    "hotlanta": "Atlanta",
    # International
    "london": "London",
    "the big smoke": "London",
    "paris": "Paris",
    "city of light": "Paris",
    "city of lights": "Paris",
    "tokyo": "Tokyo",
    "berlin": "Berlin",
    "amsterdam": "Amsterdam",
    "adam": "Amsterdam",
    "rome": "Rome",
    "eternal city": "Rome",
    "sydney": "Sydney",
    "toronto": "Toronto",
    "t-dot": "Toronto",
    "the six": "Toronto",
    "montreal": "Montreal",
    "vancouver": "Vancouver",
}

ARTIST_ALIASES: Mapping[str, str] = MappingProxyType(_ARTIST_ALIASES)
VENUE_ALIASES: Mapping[str, str] = MappingProxyType(_VENUE_ALIASES)
CITY_ALIASES: Mapping[str, str] = MappingProxyType(_CITY_ALIASES)
ALL_ALIASES: Mapping[str, str] = MappingProxyType({**_ARTIST_ALIASES, **_VENUE_ALIASES, **_CITY_ALIASES})

_BY_CATEGORY: Mapping[Category, Mapping[str, str]] = MappingProxyType(
    {"artist": ARTIST_ALIASES, "venue": VENUE_ALIASES, "city": CITY_ALIASES}
)


def _normalized_index(table: Mapping[str, str]) -> Mapping[str, str]:
    index: dict[str, str] = {}
    for alias, canonical in table.items():
        key = normalize_for_matching(alias)
        # The first spelling wins when two aliases fold to the same key
        if key and key not in index:
            index[key] = canonical
    return MappingProxyType(index)


_NORMALIZED: Mapping[Optional[Category], Mapping[str, str]] = MappingProxyType(
    {
        **{category: _normalized_index(_BY_CATEGORY[category]) for category in CATEGORIES},
        None: _normalized_index(ALL_ALIASES),
    }
)


def aliases_for_category(category: Optional[Category]) -> Mapping[str, str]:
    if category is None:
        return ALL_ALIASES
    return _BY_CATEGORY.get(category, MappingProxyType({}))


def normalized_aliases(category: Optional[Category] = None) -> Mapping[str, str]:
    """Alias table keyed by `normalize_for_matching(alias)`."""
    return _NORMALIZED.get(category, MappingProxyType({}))


def lookup_builtin(term: Optional[str], category: Optional[Category] = None) -> Optional[str]:
    if not term:
        return None
    return aliases_for_category(category).get(term.lower().strip())


def lookup_builtin_normalized(term: Optional[str], category: Optional[Category] = None) -> Optional[str]:
    key = normalize_for_matching(term or "")
    if not key:
        return None
    return normalized_aliases(category).get(key)


def builtin_aliases_for(canonical: str, category: Optional[Category] = None) -> list[str]:
    """Reverse lookup: every built-in alias whose canonical name matches, case-insensitively."""
    target = canonical.lower()
    return [alias for alias, name in aliases_for_category(category).items() if name.lower() == target]
