"""
Static lookup tables used by the profile extractor and the user sync.
"""

from types import MappingProxyType


# Full state names recognised in free text
STATE_CODES = MappingProxyType({
    "california": "CA",
    "new york": "NY",
    "texas": "TX",
    "florida": "FL",
    "illinois": "IL",
    "ohio": "OH",
    "georgia": "GA",
})

DEFAULT_STATE = "NY"

COUNTRY_CODES = MappingProxyType({
    "canada": "CA",
    "uk": "GB",
    "united kingdom": "GB",
    "australia": "AU",
    "germany": "DE",
    "france": "FR",
    "italy": "IT",
    "spain": "ES",
    "netherlands": "NL",
    "india": "IN",
    "japan": "JP",
    "china": "CN",
    "brazil": "BR",
    "mexico": "MX",
})

US_COUNTRY_CODES = frozenset({"US", "USA"})

# Keys are upper-cased codes and country names
CURRENCY_BY_COUNTRY = MappingProxyType({
    "US": "USD",
    "USA": "USD",
    "UNITED STATES": "USD",
    "CA": "CAD",
    "CANADA": "CAD",
    "UK": "GBP",
    "GB": "GBP",
    "UNITED KINGDOM": "GBP",
    "AU": "AUD",
    "AUSTRALIA": "AUD",
    "DE": "EUR",
    "GERMANY": "EUR",
    "FR": "EUR",
    "FRANCE": "EUR",
    "IT": "EUR",
    "ITALY": "EUR",
    "ES": "EUR",
    "SPAIN": "EUR",
    "NL": "EUR",
    "NETHERLANDS": "EUR",
    "IN": "INR",
    "INDIA": "INR",
    "JP": "JPY",
    "JAPAN": "JPY",
    "CN": "CNY",
    "CHINA": "CNY",
    "BR": "BRL",
    "BRAZIL": "BRL",
    "MX": "MXN",
    "MEXICO": "MXN",
})

DEFAULT_CURRENCY = "USD"


def currency_for_country(country) -> str:
    """Map a country code or name to its currency, defaulting to USD."""
    if not country:
        return DEFAULT_CURRENCY
    return CURRENCY_BY_COUNTRY.get(country.strip().upper(), DEFAULT_CURRENCY)
