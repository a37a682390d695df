from integrations.forms.client import (
    FIELD_IDS,
    FormsClient,
    SendResult,
    build_form_payload,
    post_milestone_event,
    utc_timestamp,
)

__all__ = [
    'FIELD_IDS',
    'FormsClient',
    'SendResult',
    'build_form_payload',
    'post_milestone_event',
    'utc_timestamp',
]
