"""
Static reply catalog.

Pre-built Send API message objects keyed by command keyword, plus the
persistent menu configured at startup. Loaded once at import and never
mutated: lookups hand out deep copies.

ref: https://developers.facebook.com/docs/messenger-platform/send-messages/templates
"""

import copy
from types import MappingProxyType
from typing import Any, Mapping

ReplyPayload = dict[str, Any]

_ASSETS = "https://messenger-jincana.herokuapp.com/assets"

GENERIC: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "generic",
            "elements": [
                {
                    "title": "rift",
                    "subtitle": "Next-generation virtual reality",
                    "item_url": "https://www.oculus.com/en-us/rift/",
                    "image_url": f"{_ASSETS}/rift.png",
                    "buttons": [
                        {"type": "web_url", "url": "https://www.oculus.com/en-us/rift/", "title": "Open Web URL"},
                        {"type": "postback", "title": "Call Postback", "payload": "Payload for first bubble"},
                    ],
                },
                {
                    "title": "touch",
                    "subtitle": "Your Hands, Now in VR",
                    "item_url": "https://www.oculus.com/en-us/touch/",
                    "image_url": f"{_ASSETS}/touch.png",
                    "buttons": [
                        {"type": "web_url", "url": "https://www.oculus.com/en-us/touch/", "title": "Open Web URL"},
                        {"type": "postback", "title": "Call Postback", "payload": "Payload for second bubble"},
                    ],
                },
            ],
        },
    }
}

IMAGE: ReplyPayload = {
    "attachment": {"type": "image", "payload": {"url": f"{_ASSETS}/rift.png"}}
}

AUDIO: ReplyPayload = {
    "attachment": {"type": "audio", "payload": {"url": f"{_ASSETS}/sample.mp3"}}
}

VIDEO: ReplyPayload = {
    "attachment": {"type": "video", "payload": {"url": f"{_ASSETS}/allofus480.mov"}}
}

FILE: ReplyPayload = {
    "attachment": {"type": "file", "payload": {"url": f"{_ASSETS}/test.txt"}}
}

BUTTON: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "button",
            "text": "This is test text",
            "buttons": [
                {"type": "web_url", "url": "https://www.oculus.com/en-us/rift/", "title": "Open Web URL"},
                {"type": "postback", "title": "Trigger Postback", "payload": "DEVELOPER_DEFINED_PAYLOAD"},
                {"type": "phone_number", "title": "Call Phone Number", "payload": "+16505551234"},
            ],
        },
    }
}

RECEIPT: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "receipt",
            "recipient_name": "Peter Chang",
            "order_number": "order1234",
            "currency": "USD",
            "payment_method": "Visa 1234",
            "timestamp": "1428444852",
            "elements": [
                {
                    "title": "Oculus Rift",
                    "subtitle": "Includes: headset, sensor, remote",
                    "quantity": 1,
                    "price": 599.00,
                    "currency": "USD",
                    "image_url": f"{_ASSETS}/riftsq.png",
                },
                {
                    "title": "Samsung Gear VR",
                    "subtitle": "Frost White",
                    "quantity": 1,
                    "price": 99.99,
                    "currency": "USD",
                    "image_url": f"{_ASSETS}/gearvrsq.png",
                },
            ],
            "address": {
                "street_1": "1 Hacker Way",
                "street_2": "",
                "city": "Menlo Park",
                "postal_code": "94025",
                "state": "CA",
                "country": "US",
            },
            "summary": {
                "subtotal": 698.99,
                "shipping_cost": 20.00,
                "total_tax": 57.67,
                "total_cost": 626.66,
            },
            "adjustments": [
                {"name": "New Customer Discount", "amount": -50},
                {"name": "$100 Off Coupon", "amount": -100},
            ],
        },
    }
}

QUICK_REPLIES_NORMAL: ReplyPayload = {
    "text": "What's your favorite movie genre?",
    "quick_replies": [
        {"content_type": "text", "title": "Action", "payload": "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_ACTION"},
        {"content_type": "text", "title": "Comedy", "payload": "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_COMEDY"},
        {"content_type": "text", "title": "Drama", "payload": "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_DRAMA"},
    ],
}

QUICK_REPLIES_WITH_IMAGE: ReplyPayload = {
    "text": "Pick a color:",
    "quick_replies": [
        {
            "content_type": "text",
            "title": "Red",
            "payload": "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_RED",
            "image_url": f"{_ASSETS}/red.png",
        },
        {
            "content_type": "text",
            "title": "Green",
            "payload": "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_GREEN",
            "image_url": f"{_ASSETS}/green.png",
        },
    ],
}

QUICK_REPLIES_WITH_LOCATION: ReplyPayload = {
    "text": "Please share your location:",
    "quick_replies": [{"content_type": "location"}],
}

ITINERARY: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "airline_itinerary",
            "intro_message": "Here's your flight itinerary.",
            "locale": "en_US",
            "pnr_number": "ABCDEF",
            "passenger_info": [
                {"name": "Farbound Smith Jr", "ticket_number": "0741234567890", "passenger_id": "p001"},
                {"name": "Nick Jones", "ticket_number": "0741234567891", "passenger_id": "p002"},
            ],
            "flight_info": [
                {
                    "connection_id": "c001",
                    "segment_id": "s001",
                    "flight_number": "KL9123",
                    "aircraft_type": "Boeing 737",
                    "departure_airport": {"airport_code": "SFO", "city": "San Francisco"},
                    "arrival_airport": {"airport_code": "SLC", "city": "Salt Lake City"},
                    "flight_schedule": {
                        "departure_time": "2016-01-02T19:45",
                        "arrival_time": "2016-01-02T21:20",
                    },
                    "travel_class": "business",
                },
                {
                    "connection_id": "c002",
                    "segment_id": "s002",
                    "flight_number": "KL321",
                    "aircraft_type": "Boeing 747-200",
                    "travel_class": "business",
                    "departure_airport": {"airport_code": "SLC", "city": "Salt Lake City", "terminal": "T4", "gate": "G8"},
                    "arrival_airport": {"airport_code": "AMS", "city": "Amsterdam", "terminal": "T4", "gate": "G8"},
                    "flight_schedule": {
                        "departure_time": "2016-01-02T22:45",
                        "arrival_time": "2016-01-03T17:20",
                    },
                },
            ],
            "passenger_segment_info": [
                {"segment_id": "s001", "passenger_id": "p001", "seat": "12A", "seat_type": "Business"},
                {"segment_id": "s001", "passenger_id": "p002", "seat": "12B", "seat_type": "Business"},
                {
                    "segment_id": "s002",
                    "passenger_id": "p001",
                    "seat": "73A",
                    "seat_type": "World Business",
                    "product_info": [{"title": "Lounge", "value": "Complimentary lounge access"}],
                },
            ],
            "price_info": [{"title": "Fuel surcharge", "amount": "1597", "currency": "USD"}],
            "base_price": "12206",
            "tax": "200",
            "total_price": "14003",
            "currency": "USD",
        },
    }
}

CHECKIN: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "airline_checkin",
            "intro_message": "Check-in is available now.",
            "locale": "en_US",
            "pnr_number": "ABCDEF",
            "flight_info": [
                {
                    "flight_number": "f001",
                    "departure_airport": {"airport_code": "SFO", "city": "San Francisco", "terminal": "T4", "gate": "G8"},
                    "arrival_airport": {"airport_code": "SEA", "city": "Seattle", "terminal": "T4", "gate": "G8"},
                    "flight_schedule": {
                        "boarding_time": "2016-01-05T15:05",
                        "departure_time": "2016-01-05T15:45",
                        "arrival_time": "2016-01-05T17:30",
                    },
                }
            ],
            "checkin_url": "https://www.airline.com/check-in",
        },
    }
}

BOARDINGPASS: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "airline_boardingpass",
            "intro_message": "You are checked in.",
            "locale": "en_US",
            "boarding_pass": [
                {
                    "passenger_name": "SMITH/NICOLAS",
                    "pnr_number": "CG4X7U",
                    "seat": "74J",
                    "logo_image_url": f"{_ASSETS}/logo.png",
                    "header_image_url": f"{_ASSETS}/header.png",
                    "qr_code": "M1SMITH/NICOLAS  CG4X7U nawouehgawgnapwi3jfa0wfh",
                    "above_bar_code_image_url": f"{_ASSETS}/above_bar_code.png",
                    "auxiliary_fields": [
                        {"label": "Terminal", "value": "T1"},
                        {"label": "Departure", "value": "30OCT 19:05"},
                    ],
                    "secondary_fields": [
                        {"label": "Boarding", "value": "18:30"},
                        {"label": "Gate", "value": "D57"},
                        {"label": "Seat", "value": "74J"},
                        {"label": "Sec.Nr.", "value": "003"},
                    ],
                    "flight_info": {
                        "flight_number": "KL0642",
                        "departure_airport": {"airport_code": "JFK", "city": "New York", "terminal": "T1", "gate": "D57"},
                        "arrival_airport": {"airport_code": "AMS", "city": "Amsterdam"},
                        "flight_schedule": {
                            "departure_time": "2016-01-02T19:05",
                            "arrival_time": "2016-01-05T17:30",
                        },
                    },
                }
            ],
        },
    }
}

FLIGHT_UPDATE: ReplyPayload = {
    "attachment": {
        "type": "template",
        "payload": {
            "template_type": "airline_update",
            "intro_message": "Your flight is delayed",
            "update_type": "delay",
            "locale": "en_US",
            "pnr_number": "CF23G2",
            "update_flight_info": {
                "flight_number": "KL123",
                "departure_airport": {"airport_code": "SFO", "city": "San Francisco", "terminal": "T4", "gate": "G8"},
                "arrival_airport": {"airport_code": "AMS", "city": "Amsterdam", "terminal": "T4", "gate": "G8"},
                "flight_schedule": {
                    "boarding_time": "2015-12-26T10:30",
                    "departure_time": "2015-12-26T11:30",
                    "arrival_time": "2015-12-27T07:30",
                },
            },
        },
    }
}

# Persistent menu for the page profile
MENU: list[dict[str, Any]] = [
    {
        "locale": "default",
        "composer_input_disabled": False,
        "call_to_actions": [
            {"type": "postback", "title": "Help", "payload": "Help"},
            {"type": "postback", "title": "Buy", "payload": "Buy"},
            {"type": "web_url", "title": "View Website", "url": "https://developers.facebook.com/docs/messenger-platform"},
        ],
    }
]

KEYWORDS: Mapping[str, ReplyPayload] = MappingProxyType({
    "generic": GENERIC,
    "image": IMAGE,
    "audio": AUDIO,
    "video": VIDEO,
    "file": FILE,
    "button": BUTTON,
    "receipt": RECEIPT,
    "quick": QUICK_REPLIES_NORMAL,
    "quickImage": QUICK_REPLIES_WITH_IMAGE,
    "quickLocation": QUICK_REPLIES_WITH_LOCATION,
    "itinerary": ITINERARY,
    "checkin": CHECKIN,
    "boardingpass": BOARDINGPASS,
    "flightupdate": FLIGHT_UPDATE,
})


def get_menu() -> list[dict[str, Any]]:
    """Copy of the persistent menu."""
    return copy.deepcopy(MENU)
