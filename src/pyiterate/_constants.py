"""Internal constants shared across the library."""

SDK_VERSION = "0.1.0"
API_HOST = "https://iteratehq.com"
API_VERSION = "v1"
USER_AGENT = f"pyiterate/{SDK_VERSION}"

#: Discriminator sent as ``type`` in every embed context.
EMBED_TYPE = "mobile"

EMBED_ENDPOINT = "/surveys/embed"
DISPLAYED_ENDPOINT = "/surveys/{survey_id}/displayed"
