# wa_relay/ui_routes.py
from flask import Blueprint, render_template

from wa_relay.models import MIN_PHONE_LENGTH

ui_bp = Blueprint('ui', __name__)

PHONE_FIELD = {
    "name": "phoneNumber",
    "label": "Phone number",
    "type": "tel",
    "placeholder": "79001234567",
    "minlength": MIN_PHONE_LENGTH,
}

# One form per relay endpoint, rendered in this order
OPERATIONS = [
    {"endpoint": "get-settings", "title": "getSettings", "fields": []},
    {"endpoint": "get-state", "title": "getStateInstance", "fields": []},
    {
        "endpoint": "send-message",
        "title": "sendMessage",
        "fields": [
            PHONE_FIELD,
            {"name": "messageText", "label": "Message", "type": "textarea", "placeholder": "Hello!"},
        ],
    },
    {
        "endpoint": "send-file",
        "title": "sendFileByUrl",
        "fields": [
            PHONE_FIELD,
            {"name": "fileUrl", "label": "File URL", "type": "url",
             "placeholder": "https://example.com/file.pdf"},
        ],
    },
]


@ui_bp.route('/', methods=['GET'])
def index():
    return render_template('index.html', operations=OPERATIONS)
