"""Master Data — built-in catalog rows seeded at startup (languages, voices, themes, ...).

Invariants:
    - Every row validates against its catalog's Create schema
    - Natural keys are unique within each table below
"""

LANGUAGES: list[tuple[str, str, str]] = [
    # (shortcode, name, country)
    ("EN", "English", "United States"),
    ("EN-US", "English (US)", "United States"),
    ("EN-GB", "English (UK)", "United Kingdom"),
    ("EN-CA", "English (Canada)", "Canada"),
    ("EN-AU", "English (Australia)", "Australia"),
    ("ES", "Spanish", "Spain"),
    ("ES-MX", "Spanish (Mexico)", "Mexico"),
    ("ES-AR", "Spanish (Argentina)", "Argentina"),
    ("FR", "French", "France"),
    ("FR-CA", "French (Canada)", "Canada"),
    ("DE", "German", "Germany"),
    ("DE-AT", "German (Austria)", "Austria"),
    ("DE-CH", "German (Switzerland)", "Switzerland"),
    ("IT", "Italian", "Italy"),
    ("PT", "Portuguese", "Portugal"),
    ("PT-BR", "Portuguese (Brazil)", "Brazil"),
    ("RU", "Russian", "Russia"),
    ("NL", "Dutch", "Netherlands"),
    ("PL", "Polish", "Poland"),
    ("SV", "Swedish", "Sweden"),
    ("NO", "Norwegian", "Norway"),
    ("DA", "Danish", "Denmark"),
    ("FI", "Finnish", "Finland"),
    ("TR", "Turkish", "Turkey"),
    ("EL", "Greek", "Greece"),
    ("HE", "Hebrew", "Israel"),
    ("CS", "Czech", "Czech Republic"),
    ("SK", "Slovak", "Slovakia"),
    ("HU", "Hungarian", "Hungary"),
    ("RO", "Romanian", "Romania"),
    ("BG", "Bulgarian", "Bulgaria"),
    ("HR", "Croatian", "Croatia"),
    ("SL", "Slovenian", "Slovenia"),
    ("ET", "Estonian", "Estonia"),
    ("LV", "Latvian", "Latvia"),
    ("LT", "Lithuanian", "Lithuania"),
    ("MT", "Maltese", "Malta"),
    ("JA", "Japanese", "Japan"),
    ("KO", "Korean", "South Korea"),
    ("ZH", "Chinese", "China"),
    ("ZH-CN", "Chinese (Simplified)", "China"),
    ("ZH-TW", "Chinese (Traditional)", "Taiwan"),
    ("TH", "Thai", "Thailand"),
    ("VI", "Vietnamese", "Vietnam"),
    ("ID", "Indonesian", "Indonesia"),
    ("MS", "Malay", "Malaysia"),
    ("TL", "Filipino", "Philippines"),
    ("KM", "Khmer", "Cambodia"),
    ("LO", "Lao", "Laos"),
    ("MY", "Burmese", "Myanmar"),
    ("SI", "Sinhala", "Sri Lanka"),
    ("NE", "Nepali", "Nepal"),
    ("FA", "Persian", "Iran"),
    ("KU", "Kurdish", "Iraq"),
    ("AR", "Arabic", "Saudi Arabia"),
    ("HI", "Hindi", "India"),
    ("SA", "Sanskrit", "India"),
    ("MR", "Marathi", "India"),
    ("TE", "Telugu", "India"),
    ("ML", "Malayalam", "India"),
    ("UR", "Urdu", "India"),
    ("PA", "Punjabi", "India"),
    ("BN", "Bengali", "India"),
    ("GU", "Gujarati", "India"),
    ("OR", "Odia", "India"),
    ("AS", "Assamese", "India"),
    ("KN", "Kannada", "India"),
    ("TA", "Tamil", "India"),
    ("MAI", "Maithili", "India"),
    ("AM", "Amharic", "Ethiopia"),
    ("SW", "Swahili", "Tanzania"),
    ("ZU", "Zulu", "South Africa"),
    ("AF", "Afrikaans", "South Africa"),
    ("XH", "Xhosa", "South Africa"),
    ("YO", "Yoruba", "Nigeria"),
    ("IG", "Igbo", "Nigeria"),
    ("HA", "Hausa", "Nigeria"),
    ("SO", "Somali", "Somalia"),
    ("RW", "Kinyarwanda", "Rwanda"),
    ("LG", "Luganda", "Uganda"),
]

# locale -> (language, country, accent, label)
_VOICE_LOCALES: dict[str, tuple[str, str, str, str]] = {
    "en-US": ("English", "United States", "American", "American English"),
    "en-GB": ("English", "United Kingdom", "British", "British English"),
    "en-AU": ("English", "Australia", "Australian", "Australian English"),
    "hi-IN": ("Hindi", "India", "Indian", "Hindi"),
    "es-ES": ("Spanish", "Spain", "Castilian", "Spanish (Spain)"),
    "es-US": ("Spanish", "United States", "Latin American", "Spanish (US)"),
    "fr-FR": ("French", "France", "Parisian", "French (France)"),
    "fr-CA": ("French", "Canada", "Québécois", "French (Canada)"),
    "de-DE": ("German", "Germany", "Standard", "German"),
    "zh-CN": ("Chinese", "China", "Mandarin", "Mandarin Chinese"),
    "ja-JP": ("Japanese", "Japan", "Standard", "Japanese"),
    "ko-KR": ("Korean", "South Korea", "Seoul", "Korean"),
    "ar-SA": ("Arabic", "Saudi Arabia", "Gulf", "Arabic"),
    "pt-BR": ("Portuguese", "Brazil", "Brazilian", "Brazilian Portuguese"),
    "ru-RU": ("Russian", "Russia", "Standard", "Russian"),
    "it-IT": ("Italian", "Italy", "Standard", "Italian"),
    "nl-NL": ("Dutch", "Netherlands", "Standard", "Dutch"),
    "pl-PL": ("Polish", "Poland", "Standard", "Polish"),
    "sv-SE": ("Swedish", "Sweden", "Standard", "Swedish"),
    "tr-TR": ("Turkish", "Turkey", "Istanbul", "Turkish"),
    "th-TH": ("Thai", "Thailand", "Central", "Thai"),
    "vi-VN": ("Vietnamese", "Vietnam", "Northern", "Vietnamese"),
    "id-ID": ("Indonesian", "Indonesia", "Standard", "Indonesian"),
    "uk-UA": ("Ukrainian", "Ukraine", "Standard", "Ukrainian"),
}


def _voices() -> list[dict]:
    rows = []
    for locale, (language, country, accent, label) in _VOICE_LOCALES.items():
        for variant, gender in (("A", "Female"), ("B", "Male")):
            rows.append({
                "id": f"{locale}-Standard-{variant}",
                "name": f"{label} - {gender}",
                "displayName": f"{label} ({gender})",
                "language": language,
                "country": country,
                "gender": gender,
                "accent": accent,
                "description": f"Clear {label} {gender.lower()} voice",
            })
    return rows


VOICES: list[dict] = _voices()


def _theme(theme_id, name, icon, category, description, colors) -> dict:
    return {
        "id": theme_id,
        "name": f"{name} Theme",
        "displayName": name,
        "description": description,
        "icon": icon,
        "category": category,
        "colors": colors,
    }


THEMES: list[dict] = [
    _theme("light", "Light", "☀️", "Light", "Clean and bright interface with light colors", {
        "background": "bg-white", "card": "bg-white", "text": "text-gray-900",
        "textSecondary": "text-gray-600", "border": "border-gray-200",
        "primary": "bg-blue-600", "primaryHover": "hover:bg-blue-700",
        "appBackground": "#ffffff", "appPrimary": "#2563eb",
    }),
    _theme("ocean", "Ocean", "🌊", "Nature", "Calming blue tones inspired by the ocean", {
        "background": "bg-cyan-100", "card": "bg-cyan-50", "text": "text-slate-700",
        "textSecondary": "text-slate-600", "border": "border-cyan-200",
        "primary": "bg-cyan-600", "primaryHover": "hover:bg-cyan-700",
        "appBackground": "#f0fdfa", "appPrimary": "#0891b2",
    }),
    _theme("sunset", "Sunset", "🌅", "Nature", "Warm orange and pink hues of a sunset", {
        "background": "bg-orange-100", "card": "bg-orange-50", "text": "text-stone-800",
        "textSecondary": "text-stone-600", "border": "border-orange-200",
        "primary": "bg-orange-600", "primaryHover": "hover:bg-orange-700",
        "appBackground": "#fef7ed", "appPrimary": "#ea580c",
    }),
    _theme("forest", "Forest", "🌲", "Nature", "Fresh greens inspired by the forest", {
        "background": "bg-white", "card": "bg-green-50", "text": "text-gray-900",
        "textSecondary": "text-gray-600", "border": "border-green-200",
        "primary": "bg-green-600", "primaryHover": "hover:bg-green-700",
        "appBackground": "#f0fdf4", "appPrimary": "#16a34a",
    }),
    _theme("lavender", "Lavender", "💜", "Elegant", "Soft purple tones for an elegant look", {
        "background": "bg-white", "card": "bg-purple-50", "text": "text-gray-900",
        "textSecondary": "text-gray-600", "border": "border-purple-200",
        "primary": "bg-purple-600", "primaryHover": "hover:bg-purple-700",
        "appBackground": "#faf5ff", "appPrimary": "#9333ea",
    }),
]

GENDERS: list[dict] = [
    {"id": "male", "name": "Male", "displayName": "Male",
     "description": "Male gender option"},
    {"id": "female", "name": "Female", "displayName": "Female",
     "description": "Female gender option"},
    {"id": "other", "name": "Other", "displayName": "Other",
     "description": "Other gender identity"},
    {"id": "prefer-not-to-say", "name": "Prefer not to say",
     "displayName": "Prefer not to say", "description": "Prefer not to specify gender"},
]

# (country_code, name, dialing_code)
_COUNTRIES: list[tuple[str, str, str]] = [
    ("US", "United States", "+1"),
    ("CA", "Canada", "+1"),
    ("GB", "United Kingdom", "+44"),
    ("AU", "Australia", "+61"),
    ("IN", "India", "+91"),
    ("ES", "Spain", "+34"),
    ("MX", "Mexico", "+52"),
    ("AR", "Argentina", "+54"),
    ("FR", "France", "+33"),
    ("DE", "Germany", "+49"),
    ("IT", "Italy", "+39"),
    ("PT", "Portugal", "+351"),
    ("BR", "Brazil", "+55"),
    ("RU", "Russia", "+7"),
    ("NL", "Netherlands", "+31"),
    ("SE", "Sweden", "+46"),
    ("JP", "Japan", "+81"),
    ("KR", "South Korea", "+82"),
    ("CN", "China", "+86"),
    ("SA", "Saudi Arabia", "+966"),
    ("AE", "United Arab Emirates", "+971"),
    ("TR", "Turkey", "+90"),
    ("NG", "Nigeria", "+234"),
    ("ZA", "South Africa", "+27"),
    ("SG", "Singapore", "+65"),
]

COUNTRIES: list[dict] = [
    {"countryCode": code, "name": name} for code, name, _ in _COUNTRIES
]

COUNTRY_CODES: list[dict] = [
    {"countryCode": code, "country": name, "dialingCode": dial}
    for code, name, dial in _COUNTRIES
]
