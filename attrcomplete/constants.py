"""Static completion tables."""

__all__ = [
    "ACCOUNT_MANAGEMENT_KEYS",
    "ALIAS_ATTRIBUTE_SUFFIXES",
    "BOOL_LITERALS",
    "CRUD_ACTIONS",
    "CURRENCIES",
    "FILE_EXTENSIONS",
    "FILTER_IMPLICIT_ATTRIBUTES",
    "FILTER_OPERATORS",
    "GET_ALL_QUERY_PARAMS",
    "GET_QUERY_PARAMS",
    "SORT_IMPLICIT_ATTRIBUTES",
    "TEMPLATE_CONTINUATION_FUNCTIONS",
    "TEMPLATE_GENERATOR_FUNCTIONS",
    "TOTAL_METHODS",
]

BOOL_LITERALS = ("true", "false")

CRUD_ACTIONS = ("create", "update", "delete", "get")

ACCOUNT_MANAGEMENT_KEYS = ("account_id", "account_name")

# Filter operators, in the order they are offered
FILTER_OPERATORS = ("eq(", "lt(", "gt(", "ge(", "le(", "in(", "like(")

# Fields every resource can be filtered on besides its declared attributes
FILTER_IMPLICIT_ATTRIBUTES = ("id", "created_at", "updated_at")

SORT_IMPLICIT_ATTRIBUTES = ("updated_at", "created_at")

GET_ALL_QUERY_PARAMS = ("sort", "filter", "include", "page[limit]", "page[offset]", "page[total_method]")

GET_QUERY_PARAMS = ("include",)

TOTAL_METHODS = ("exact", "estimate", "lower_bound", "observed", "cached", "none")

# Attributes of an aliased resource that can be referenced through alias/<type>/<alias>/<attr>
ALIAS_ATTRIBUTE_SUFFIXES = ("sku", "slug", "code")

FILE_EXTENSIONS = (
    "gif",
    "jpg",
    "jpeg",
    "png",
    "webp",
    "mp4",
    "mov",
    "pdf",
    "svg",
    "usdz",
    "glb",
    "jp2",
    "jxr",
    "aac",
    "vrml",
    "doc",
    "docx",
    "ppt",
    "pptx",
    "xls",
    "xlsx",
)

# Template functions that produce a value on their own
TEMPLATE_GENERATOR_FUNCTIONS = (
    "date",
    "now",
    "randAlphaNum",
    "randAlpha",
    "randAscii",
    "randNumeric",
    "pseudoRandAlphaNum",
    "pseudoRandAlpha",
    "pseudoRandNumeric",
    "pseudoRandString",
    "pseudoRandInt",
    "uuidv4",
    "duration",
)

# Template functions that only make sense after a pipe
TEMPLATE_CONTINUATION_FUNCTIONS = (
    "trim",
    "trimAll",
    "trimSuffix",
    "trimPrefix",
    "upper",
    "lower",
    "title",
    "repeat",
    "substr",
    "nospace",
    "trunc",
    "abbrev",
    "initials",
    "wrap",
    "cat",
    "replace",
    "snakecase",
    "camelcase",
    "kebabcase",
    "swapcase",
    "shufflecase",
)

CURRENCIES = (
    "AED", "AFN", "ALL", "AMD", "ANG", "AOA", "ARS", "AUD", "AWG", "AZN",
    "BAM", "BBD", "BDT", "BGN", "BHD", "BIF", "BMD", "BND", "BOB", "BRL", "BSD", "BTN", "BWP", "BYN", "BZD",
    "CAD", "CDF", "CHF", "CLP", "CNY", "COP", "CRC", "CUC", "CUP", "CVE", "CZK",
    "DJF", "DKK", "DOP", "DZD",
    "EGP", "ERN", "ETB", "EUR",
    "FJD", "FKP",
    "GBP", "GEL", "GGP", "GHS", "GIP", "GMD", "GNF", "GTQ", "GYD",
    "HKD", "HNL", "HRK", "HTG", "HUF",
    "IDR", "ILS", "IMP", "INR", "IQD", "IRR", "ISK",
    "JEP", "JMD", "JOD", "JPY",
    "KES", "KGS", "KHR", "KMF", "KPW", "KRW", "KWD", "KYD", "KZT",
    "LAK", "LBP", "LKR", "LRD", "LSL", "LYD",
    "MAD", "MDL", "MGA", "MKD", "MMK", "MNT", "MOP", "MRU", "MUR", "MVR", "MWK", "MXN", "MYR", "MZN",
    "NAD", "NGN", "NIO", "NOK", "NPR", "NZD",
    "OMR",
    "PAB", "PEN", "PGK", "PHP", "PKR", "PLN", "PYG",
    "QAR",
    "RON", "RSD", "RUB", "RWF",
    "SAR", "SBD", "SCR", "SDG", "SEK", "SGD", "SHP", "SLL", "SOS", "SPL", "SRD", "STN", "SVC", "SYP", "SZL",
    "THB", "TJS", "TMT", "TND", "TOP", "TRY", "TTD", "TVD", "TWD", "TZS",
    "UAH", "UGX", "USD", "UYU", "UZS",
    "VEF", "VND", "VUV",
    "WST",
    "XAF", "XCD", "XDR", "XOF", "XPF",
    "YER",
    "ZAR", "ZMW", "ZWD",
)  # fmt: skip
