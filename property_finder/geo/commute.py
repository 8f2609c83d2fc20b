"""Static commute tables for the two fixed destinations."""

from __future__ import annotations

COMMUTE_TO_SOUTHERN_CROSS = {
    "Glen Waverley": "45 min by train", "Box Hill": "35 min by train", "Doncaster": "50 min by bus",
    "Ringwood": "45 min by train", "Camberwell": "25 min by train", "Moorabbin": "35 min by train",
    "Preston": "25 min by train", "Blackburn": "40 min by train", "Reservoir": "30 min by train",
    "Coburg": "25 min by train", "Brunswick": "20 min by train", "Footscray": "15 min by train",
    "Sunshine": "25 min by train", "St Albans": "35 min by train", "Werribee": "45 min by train",
    "Point Cook": "50 min by bus", "Craigieburn": "45 min by train", "South Morang": "50 min by train",
    "Epping": "45 min by train", "Bundoora": "40 min by bus", "Heidelberg": "30 min by train",
    "Ivanhoe": "25 min by train", "Kew": "20 min by bus", "Hawthorn": "15 min by train",
    "Malvern": "20 min by train", "Caulfield": "20 min by train", "Bentleigh": "30 min by train",
    "Cheltenham": "35 min by train", "Mentone": "40 min by train", "Frankston": "55 min by train",
    "Clayton": "35 min by train", "Dandenong": "45 min by train", "Berwick": "50 min by train",
    "Croydon": "55 min by train", "Lilydale": "60 min by train", "Belgrave": "65 min by train",
    "Williamstown": "25 min by train", "Altona": "35 min by train", "Newport": "20 min by train",
    "Essendon": "20 min by train", "Moonee Ponds": "15 min by train", "Pascoe Vale": "25 min by train",
    "Niddrie": "25 min by bus", "Northcote": "20 min by train", "Thornbury": "22 min by train",
    "Fairfield": "20 min by train", "Mount Waverley": "40 min by train", "Mulgrave": "45 min by bus",
    "Wheelers Hill": "50 min by bus", "Mill Park": "40 min by train", "Doreen": "55 min by bus",
    "Mernda": "55 min by train", "Lara": "45 min by train (V/Line)", "Geelong": "~1h by train (V/Line)",
}

COMMUTE_TO_COLLINGWOOD = {
    "Glen Waverley": "55 min", "Box Hill": "50 min", "Doncaster": "40 min", "Ringwood": "1h 10min",
    "Camberwell": "20 min", "Moorabbin": "1h", "Preston": "25 min", "Blackburn": "58 min",
    "Reservoir": "35 min", "Coburg": "30 min", "Brunswick": "25 min", "Footscray": "30 min",
    "Sunshine": "40 min", "St Albans": "50 min", "Werribee": "1h", "Point Cook": "1h 10min",
    "Craigieburn": "55 min", "South Morang": "45 min", "Epping": "40 min", "Bundoora": "35 min",
    "Heidelberg": "25 min", "Ivanhoe": "20 min", "Kew": "15 min", "Hawthorn": "15 min",
    "Malvern": "25 min", "Caulfield": "30 min", "Bentleigh": "40 min", "Cheltenham": "45 min",
    "Mentone": "50 min", "Frankston": "1h 10min", "Clayton": "45 min", "Dandenong": "55 min",
    "Berwick": "1h", "Croydon": "1h 5min", "Lilydale": "1h 10min", "Belgrave": "1h 15min",
    "Williamstown": "35 min", "Altona": "45 min", "Newport": "30 min", "Essendon": "30 min",
    "Moonee Ponds": "25 min", "Pascoe Vale": "30 min", "Niddrie": "35 min", "Northcote": "15 min",
    "Thornbury": "18 min", "Fairfield": "15 min", "Mount Waverley": "50 min", "Mulgrave": "55 min",
    "Wheelers Hill": "1h", "Mill Park": "35 min", "Doreen": "50 min", "Mernda": "50 min",
    "Lara": "1h 5min", "Geelong": "1h 15min",
}


def match_commute_suburb(name: str | None) -> str | None:
    """First table suburb contained in ``name``, compared case-insensitively."""
    if not name:
        return None
    lowered = name.lower()
    for suburb in COMMUTE_TO_SOUTHERN_CROSS:
        if suburb.lower() in lowered:
            return suburb
    return None


def commute_lookup(name: str | None, table: dict[str, str] = COMMUTE_TO_SOUTHERN_CROSS) -> str | None:
    suburb = match_commute_suburb(name)
    if suburb is None:
        return None
    return table.get(suburb)
