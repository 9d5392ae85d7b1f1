from django.conf import settings

DEFAULTS = {
    'CONTENTION_RETRIES': 3,
    'CONTENTION_BACKOFF': 0.05,
    'FEED_DEFAULT_PAGE_SIZE': 10,
    'FEED_MAX_PAGE_SIZE': 50,
    'FEED_BATCH_SIZE': 50,
    'PASS_TTL_DAYS': None,
    'MESSAGE_MAX_LENGTH': 2000,
    'MESSAGE_PAGE_SIZE': 50,
    'MESSAGE_MAX_PAGE_SIZE': 200,
    'EVENT_SINK': 'matching.events.ChannelLayerSink',
}


def get_setting(name):
    """
    Read a knob from settings.MATCHING, falling back to DEFAULTS.
    Looked up on every call so tests can override with the settings fixture.
    """
    overrides = getattr(settings, 'MATCHING', {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
