"""
Per-region gazetteer used for keyword scoring and prompt context.

The built-in table covers the eight Northeast Indian states. A YAML file
with the same shape can replace it::

    Assam:
      keywords: [assam, guwahati]
      districts: [kamrup, jorhat]
      landmarks: [kaziranga]
      cultural_context: tea gardens, Brahmaputra river
      tone: warm and community-focused
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class Region:
    """Gazetteer entry for one region.

    Attributes:
        name: Canonical region name, as used for ``proposed_state``
        keywords: Region and major town names
        districts: Administrative districts
        landmarks: Well-known places, rivers, festivals
        cultural_context: Short phrase used to bias enhancement tone
        tone: Preferred voice for generated headlines
    """

    name: str
    keywords: tuple[str, ...] = ()
    districts: tuple[str, ...] = ()
    landmarks: tuple[str, ...] = ()
    cultural_context: str = ""
    tone: str = ""


@dataclass
class Gazetteer:
    regions: dict[str, Region] = field(default_factory=dict)

    def names(self) -> list[str]:
        return list(self.regions)

    def get(self, name: str | None) -> Region | None:
        if not name:
            return None
        return self.regions.get(self.canonical(name) or "")

    def canonical(self, name: str | None) -> str | None:
        """Return the gazetteer spelling of ``name``, matched case-insensitively."""
        if not name:
            return None
        wanted = name.strip().lower()
        for region in self.regions:
            if region.lower() == wanted:
                return region
        return None


_NORTHEAST_STATES: dict[str, dict[str, Any]] = {
    "Assam": {
        "keywords": [
            "assam", "guwahati", "dispur", "brahmaputra", "kaziranga", "kamrup", "jorhat",
            "silchar", "dibrugarh", "tezpur", "nagaon", "barpeta", "goalpara", "dhubri", "bongaigaon",
        ],
        "districts": [
            "kamrup", "jorhat", "silchar", "dibrugarh", "tezpur", "nagaon", "barpeta", "goalpara",
            "dhubri", "bongaigaon", "sonitpur", "lakhimpur", "dhemaji", "tinsukia", "sivasagar",
            "golaghat", "karbi anglong", "dima hasao",
        ],
        "landmarks": ["kaziranga", "manas", "brahmaputra", "kamakhya", "majuli", "haflong"],
        "cultural_context": "tea gardens, Brahmaputra river, one-horned rhinos, Bihu festival",
        "tone": "warm and community-focused",
    },
    "Manipur": {
        "keywords": [
            "manipur", "imphal", "loktak", "churachandpur", "thoubal", "bishnupur", "senapati",
            "ukhrul", "chandel", "tamenglong",
        ],
        "districts": [
            "imphal east", "imphal west", "churachandpur", "thoubal", "bishnupur", "senapati",
            "ukhrul", "chandel", "tamenglong", "kangpokpi", "tengnoupal", "kamjong", "noney",
            "pherzawl", "jiribam", "kakching",
        ],
        "landmarks": ["loktak lake", "kangla", "keibul lamjao", "dzukou valley"],
        "cultural_context": "Loktak Lake, classical dance, martial arts, sports culture",
        "tone": "artistic and athletic",
    },
    "Meghalaya": {
        "keywords": [
            "meghalaya", "shillong", "cherrapunji", "mawsynram", "tura", "jowai", "nongpoh",
            "baghmara", "williamnagar",
        ],
        "districts": [
            "east khasi hills", "west khasi hills", "south west khasi hills", "ri bhoi",
            "east garo hills", "west garo hills", "south garo hills", "north garo hills",
            "south west garo hills", "east jaintia hills", "west jaintia hills",
        ],
        "landmarks": [
            "cherrapunji", "mawsynram", "living root bridges", "elephant falls", "umiam lake",
            "dawki", "mawlynnong",
        ],
        "cultural_context": "living root bridges, wettest place on earth, tribal culture",
        "tone": "mystical and nature-focused",
    },
    "Mizoram": {
        "keywords": [
            "mizoram", "aizawl", "lunglei", "champhai", "serchhip", "kolasib", "lawngtlai",
            "mamit", "saiha",
        ],
        "districts": [
            "aizawl", "lunglei", "champhai", "serchhip", "kolasib", "lawngtlai", "mamit", "saiha",
            "hnahthial", "saitual", "khawzawl",
        ],
        "landmarks": ["blue mountain", "phawngpui", "vantawng falls", "reiek"],
        "cultural_context": "bamboo forests, hill tribes, festivals",
        "tone": "traditional and festive",
    },
    "Nagaland": {
        "keywords": [
            "nagaland", "kohima", "dimapur", "mokokchung", "tuensang", "mon", "wokha",
            "zunheboto", "phek", "kiphire", "longleng", "peren",
        ],
        "districts": [
            "kohima", "dimapur", "mokokchung", "tuensang", "mon", "wokha", "zunheboto", "phek",
            "kiphire", "longleng", "peren", "noklak", "shamator", "tseminyu", "niuland",
            "chumukedima",
        ],
        "landmarks": ["hornbill festival", "dzukou valley", "japfu peak", "mount saramati"],
        "cultural_context": "Hornbill festival, tribal heritage, warrior culture",
        "tone": "proud and traditional",
    },
    "Arunachal Pradesh": {
        "keywords": [
            "arunachal pradesh", "itanagar", "naharlagun", "pasighat", "along", "bomdila",
            "tawang", "ziro", "tezu", "changlang", "khonsa", "seppa", "roing", "anini", "hawai",
            "daporijo", "basar", "koloriang", "yingkiong",
        ],
        "districts": [
            "tawang", "west kameng", "east kameng", "papum pare", "kurung kumey", "kra daadi",
            "lower subansiri", "upper subansiri", "west siang", "east siang", "siang",
            "upper siang", "lower siang", "lower dibang valley", "dibang valley", "anjaw",
            "lohit", "namsai", "changlang", "tirap", "longding",
        ],
        "landmarks": [
            "tawang monastery", "sela pass", "bumla pass", "namdapha", "ziro valley", "mechuka",
            "roing",
        ],
        "cultural_context": "sunrise state, monasteries, diverse tribes",
        "tone": "spiritual and diverse",
    },
    "Tripura": {
        "keywords": [
            "tripura", "agartala", "dharmanagar", "kailashahar", "ambassa", "belonia", "khowai",
            "teliamura", "sonamura", "sabroom", "udaipur", "amarpur", "ranirbazar", "kamalpur",
            "kumarghat",
        ],
        "districts": [
            "west tripura", "south tripura", "dhalai", "north tripura", "khowai", "gomati",
            "unakoti", "sepahijala",
        ],
        "landmarks": [
            "ujjayanta palace", "neermahal", "sepahijala", "clouded leopard national park",
        ],
        "cultural_context": "royal palaces, fourteen gods, traditional crafts",
        "tone": "royal and traditional",
    },
    "Sikkim": {
        "keywords": [
            "sikkim", "gangtok", "namchi", "gyalshing", "mangan", "pelling", "yuksom", "lachung",
            "lachen", "ravangla",
        ],
        "districts": ["east sikkim", "west sikkim", "north sikkim", "south sikkim"],
        "landmarks": [
            "kanchenjunga", "nathu la", "tsomgo lake", "gurudongmar lake", "yumthang valley",
            "rumtek monastery",
        ],
        "cultural_context": "Kanchenjunga, organic farming, Buddhist culture",
        "tone": "peaceful and organic",
    },
}


def build_gazetteer(raw: dict[str, dict[str, Any]]) -> Gazetteer:
    """Build a Gazetteer from a ``{region: {keywords, districts, ...}}`` mapping."""
    regions: dict[str, Region] = {}
    for name, data in raw.items():
        data = data or {}
        regions[name] = Region(
            name=name,
            keywords=_terms(data.get("keywords")),
            districts=_terms(data.get("districts")),
            landmarks=_terms(data.get("landmarks")),
            cultural_context=str(data.get("cultural_context") or ""),
            tone=str(data.get("tone") or ""),
        )
    return Gazetteer(regions=regions)


def load_gazetteer(path: str | None = None) -> Gazetteer:
    """Load a gazetteer from YAML, or return the built-in one when no path is given."""
    if not path:
        return build_gazetteer(_NORTHEAST_STATES)

    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid gazetteer file {path}: expected a mapping of regions")
    return build_gazetteer(raw)


def _terms(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    return tuple(str(v).strip().lower() for v in values if str(v).strip())


DEFAULT_GAZETTEER = load_gazetteer()
