from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from cryptography import x509

from .errors import MalformedNameError
from .oids import display_name


class DistinguishedName:
    '''
    Ordered (display name, value) pairs of a subject or issuer name.

    Encoding order is preserved and repeated display names (two OU entries,
    for example) are all kept. Mapping style lookups return the first match.
    '''

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Tuple[str, str]] = ()):
        self._entries = tuple((str(k), str(v)) for k, v in entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries)

    def __contains__(self, name) -> bool:
        return any(k == name for k, _ in self._entries)

    def __getitem__(self, key: Union[int, str]):
        if isinstance(key, int):
            return self._entries[key]
        for k, v in self._entries:
            if k == key:
                return v
        raise KeyError(key)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DistinguishedName):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"DistinguishedName({list(self._entries)!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self[name]
        except KeyError:
            return default

    def get_all(self, name: str) -> List[str]:
        return [v for k, v in self._entries if k == name]

    def keys(self) -> List[str]:
        return [k for k, _ in self._entries]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries)

    def to_dict(self) -> Dict[str, str]:
        # later duplicates overwrite earlier ones, like a plain object would
        out: Dict[str, str] = {}
        for k, v in self._entries:
            out[k] = v
        return out


def _value_text(value: Any, name: str) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    text = str(value)
    if "\x00" in text:
        raise MalformedNameError(f"Embedded NUL in name attribute {name}.", attribute=name)
    return text


def extract_name(entries: Iterable[x509.NameAttribute]) -> DistinguishedName:
    pairs = []
    for attr in entries:
        name = display_name(attr.oid)
        pairs.append((name, _value_text(attr.value, name)))
    return DistinguishedName(pairs)
