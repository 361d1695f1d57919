"""
Pytest configuration and fixtures for NichePulse tests.
"""

import json
import sys
import time
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs

import httpx
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

TIKTOK_HOST = "tiktok-scraper2.p.rapidapi.com"
INSTAGRAM_HOST = "instagram-scraper-stable-api.p.rapidapi.com"
CDN_HOST = "cdn.example.com"
DEEPGRAM_HOST = "api.deepgram.com"

# Smallest valid JPEG header is enough; nothing decodes it
FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


# ============================================================
# Settings / users
# ============================================================

@pytest.fixture
def settings():
    """Settings with every vendor key set and no .env file."""
    from nichepulse.config.settings import Settings

    return Settings(
        _env_file=None,
        rapidapi_key="test-rapidapi-key",
        instagram_rapidapi_key="test-instagram-key",
        openai_api_key="sk-test-openai",
        gemini_api_key=None,
        deepgram_api_key=None,
        supabase_url=None,
        supabase_anon_key=None,
        supabase_service_key=None,
        stripe_secret_key=None,
        stripe_webhook_secret=None,
    )


@pytest.fixture
def fake_user():
    from nichepulse.app.auth import AuthUser

    return AuthUser(id="user-123", email="creator@example.com", full_name="Test Creator", access_token="token-abc")


# ============================================================
# Vendor payload builders
# ============================================================

def tiktok_item(
    video_id: str,
    views: int,
    age_days: float = 1,
    desc: str = "Watch this transformation. #fyp",
    likes: int = 1000,
    shares: int = 100,
    comments: int = 50,
    author: str = "chef_amina",
    cover: Optional[str] = None,
) -> dict:
    """A tiktok-scraper2 item in the stats/video/author shape."""
    return {
        "id": video_id,
        "desc": desc,
        "createTime": int(time.time() - age_days * 86_400),
        "stats": {
            "playCount": views,
            "diggCount": likes,
            "shareCount": shares,
            "commentCount": comments,
        },
        "video": {
            "duration": 21,
            "cover": cover if cover is not None else f"https://{CDN_HOST}/covers/{video_id}.jpg",
        },
        "author": {"uniqueId": author, "nickname": author.title()},
    }


def instagram_reel(
    code: str,
    views: int,
    age_days: float = 1,
    caption: str = "Three ways to style a satin hijab",
    username: str = "hijabfashion",
) -> dict:
    """A get_ig_user_reels item in the node.media shape."""
    return {
        "node": {
            "media": {
                "pk": f"pk-{code}",
                "code": code,
                "play_count": views,
                "like_count": views // 20,
                "comment_count": views // 200,
                "caption": {"text": caption},
                "taken_at": int(time.time() - age_days * 86_400),
                "video_duration": 14.5,
                "image_versions2": {"candidates": [{"url": f"https://{CDN_HOST}/ig/{code}.jpg"}]},
                "user": {"username": username},
            }
        }
    }


class FakeVendor:
    """
    In-memory stand-in for the vendor APIs (RapidAPI scrapers, Deepgram)
    and the thumbnail CDN.

    `tiktok_items` maps hashtag -> items; `default_items` is served for any
    hashtag without an entry. Hashtags in `missing_ids` get no challenge id.
    `transcripts` maps video id -> what Deepgram "hears" in that video.
    """

    def __init__(self):
        self.tiktok_items: dict[str, list] = {}
        self.default_items: list = []
        self.missing_ids: set[str] = set()
        self.failing_hashtags: set[str] = set()
        self.instagram_reels: dict[str, list] = {}
        self.transcripts: dict[str, str] = {}
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == TIKTOK_HOST and path == "/hashtag/info":
            hashtag = request.url.params["hashtag"]
            if hashtag in self.missing_ids:
                return httpx.Response(200, json={"data": {}})
            return httpx.Response(200, json={"data": {"challenge": {"id": f"cid-{hashtag}"}}})

        if host == TIKTOK_HOST and path == "/hashtag/videos":
            hashtag = request.url.params["hashtag_id"].removeprefix("cid-")
            if hashtag in self.failing_hashtags:
                raise httpx.ConnectError("connection reset", request=request)
            items = self.tiktok_items.get(hashtag, self.default_items)
            return httpx.Response(200, json={"data": {"videos": items}})

        if host == INSTAGRAM_HOST and path == "/get_ig_user_reels.php":
            form = parse_qs(request.content.decode())
            username = form["username_or_url"][0]
            return httpx.Response(200, json={"reels": self.instagram_reels.get(username, [])})

        if host == TIKTOK_HOST and path == "/video/no_watermark":
            video_id = request.url.params["video_url"].rsplit("/", 1)[-1]
            return httpx.Response(200, json={"no_watermark": f"https://{CDN_HOST}/play/{video_id}.mp4"})

        if host == DEEPGRAM_HOST and path == "/v1/listen":
            media_url = json.loads(request.content)["url"]
            video_id = media_url.rsplit("/", 1)[-1].removesuffix(".mp4")
            transcript = self.transcripts.get(video_id, "")
            return httpx.Response(200, json={
                "metadata": {"duration": 21.0},
                "results": {"channels": [{"alternatives": [{"transcript": transcript, "confidence": 0.93}]}]},
            })

        if host == CDN_HOST:
            return httpx.Response(200, content=FAKE_JPEG, headers={"content-type": "image/jpeg"})

        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def fake_vendor():
    return FakeVendor()


VISION_REPLY = "Here is what I see:\n" + json.dumps([
    {
        "id": "f1",
        "formatName": "Ingredient Flat-Lay Reveal",
        "formatDescription": "Opens on a top-down flat lay of raw ingredients with a bold text overlay.",
        "whyItWorks": "The overlay promises a payoff in the first second.",
        "howToApply": ["Flat-lay your iftar ingredients", "Overlay the dish name in bold text"],
        "engagementPotential": "High",
    },
    {
        "id": "f2",
        "formatName": "Close-Up Sizzle Shot",
        "formatDescription": "Tight close-up of food hitting a hot pan.",
        "whyItWorks": "Sound and motion stop the scroll.",
        "howToApply": ["Film the first sear up close"],
        "engagementPotential": "medium",
    },
    {
        "id": "f3",
        "formatName": "Finished Plate Face-Off",
        "formatDescription": "Split frame comparing two finished plates.",
        "whyItWorks": "Invites viewers to pick a side in the comments.",
        "howToApply": "Compare a restaurant dish with your homemade version",
        "engagementPotential": "Low",
    },
]) + "\nLet me know if you need more."


@pytest.fixture
def vision_reply():
    return VISION_REPLY


@pytest.fixture
def make_tiktok_item():
    return tiktok_item


@pytest.fixture
def make_instagram_reel():
    return instagram_reel
