import httpx
import pytest

from careercatalyst.core.errors import UpstreamSearchError
from careercatalyst.services.search_service import (
    ProfileSearchClient, build_search_query, parse_search_item
)


def make_client(handler):
    return ProfileSearchClient(http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_build_search_query_uses_top_three_skills():
    assert build_search_query("Data Scientist", ["Python", " ", "SQL", "Pandas", "Spark"]) == \
        "Data Scientist Python SQL Pandas"
    assert build_search_query(" Designer ") == "Designer"


def test_parse_search_item_splits_title():
    profile = parse_search_item({
        "title": "Jane Doe - Senior Data Scientist - Acme | LinkedIn",
        "link": "https://www.linkedin.com/in/janedoe",
        "snippet": "Experienced data scientist. View profile on LinkedIn.",
        "pagemap": {"cse_thumbnail": [{"src": "https://img.example/jane.png"}]},
    })
    assert profile.name == "Jane Doe"
    assert profile.title == "Senior Data Scientist"
    assert profile.company == "Acme"
    assert profile.description == "Experienced data scientist."
    assert profile.thumbnail_url == "https://img.example/jane.png"


def test_parse_search_item_defaults():
    profile = parse_search_item({"title": "John Smith | LinkedIn", "link": "https://www.linkedin.com/in/js"})
    assert profile.name == "John Smith"
    assert profile.title == "Position not specified"
    assert profile.company == "Company not specified"
    assert profile.thumbnail_url is None


def test_search_profiles_sends_site_query():
    seen = {}

    def handler(request):
        seen["q"] = request.url.params["q"]
        seen["num"] = request.url.params["num"]
        return httpx.Response(200, json={"items": [
            {"title": "Jane Doe - Engineer - Acme | LinkedIn", "link": "https://www.linkedin.com/in/janedoe"},
            {"title": "No link result"},
        ]})

    profiles = make_client(handler).search_profiles("Backend Engineer", ["Go", "Kafka"])

    assert seen["q"] == "site:linkedin.com/in/ Backend Engineer Go Kafka"
    assert seen["num"] == "5"
    assert [p.profile_url for p in profiles] == ["https://www.linkedin.com/in/janedoe"]


def test_search_profiles_no_items_is_empty():
    client = make_client(lambda request: httpx.Response(200, json={"searchInformation": {"totalResults": "0"}}))
    assert client.search_profiles("Astronaut") == []


def test_search_profiles_api_error():
    client = make_client(lambda request: httpx.Response(403, json={"error": {"message": "API key not valid"}}))
    with pytest.raises(UpstreamSearchError):
        client.search_profiles("Backend Engineer")


def test_search_profiles_server_error():
    client = make_client(lambda request: httpx.Response(500, text="oops"))
    with pytest.raises(UpstreamSearchError):
        client.search_profiles("Backend Engineer")


def test_search_profiles_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamSearchError):
        make_client(handler).search_profiles("Backend Engineer")
