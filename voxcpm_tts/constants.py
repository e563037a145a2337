"""All magic strings and configuration constants."""

SPLIT_MARKER = "###SPLIT###"          # reserved segment delimiter, never spoken
BRACKET_OPEN = "「"                   # only_bracketed keeps text inside these
BRACKET_CLOSE = "」"
EMPHASIS_CHAR = "*"                   # strip_emphasis drops *text like this*
VOICE_LIST_LABEL = "音色列表"          # label of the voice dropdown on the remote app
DEFAULT_VOICE = "Default"             # pseudo-voice when the dropdown is missing or empty
VOICE_ID_SEPARATOR = ","              # separator seen in duplicated voice ids ("A,A")
SYNTH_JOB = "/do_job"                 # remote synthesis endpoint name
PROMPT_TEXT = "Hello!!"               # reference prompt text sent with every job
DEFAULT_ENDPOINT = "http://localhost:7861"
DEFAULT_SPEED = 1.0
DEFAULT_SETTINGS = {
    "provider_endpoint": DEFAULT_ENDPOINT,
    "speed": DEFAULT_SPEED,
    "only_bracketed": False,
    "strip_emphasis": False,
}
LEGACY_SETTING_KEYS = {               # older settings stores used these names
    "only_brackets": "only_bracketed",
    "ignore_asterisks": "strip_emphasis",
}
AUDIO_EXTENSION = ".wav"              # used when a downloaded reference has no suffix
VERSION = "0.1.0"
