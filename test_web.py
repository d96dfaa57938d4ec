#!/usr/bin/env python3
"""Tests for the web API."""

from unittest.mock import patch

import pytest

from tv_italia import web
from tv_italia.config import config
from tv_italia.history import PlaybackHistory
from tv_italia.news import NewsItem, TickerItem
from tv_italia.recommend import Recommendation
from tv_italia.scheduler import TickerScheduler
from tv_italia.session import PlaybackController

PASSWORD = "segreto"


@pytest.fixture
def client(catalog, stream_clients, session_factory, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_PASSWORD", PASSWORD)
    web.app.config['TESTING'] = True
    web.set_services(
        catalog,
        PlaybackController(catalog, stream_clients.handler_factory),
        PlaybackHistory(session_factory),
    )
    with web.app.test_client() as client:
        yield client


@pytest.fixture
def admin(client):
    response = client.post('/api/admin/login', json={'password': PASSWORD})
    assert response.status_code == 200
    return client


def test_categories_include_filter_entry(client):
    categories = client.get('/api/categories').get_json()

    assert categories[0] == {'id': 'ALL', 'label': 'Tutti'}
    assert {'id': 'NEWS', 'label': 'Notizie'} in categories


def test_home_features_stiletv(client):
    data = client.get('/api/channels').get_json()

    assert data['featured']['id'] == 'stiletv'
    assert 'stiletv' not in [c['id'] for c in data['channels']]
    assert len(data['top_rated']) == 5
    assert data['load_error'] is None


def test_filtered_home_has_no_featured(client):
    data = client.get('/api/channels?category=NEWS').get_json()

    assert data['featured'] is None
    assert [c['id'] for c in data['channels']] == ['rainews24']
    assert data['channels'][0]['mode'] == 'generic_embed'


def test_channel_json_carries_external_link(client):
    data = client.get('/api/channels/radioitaliatv').get_json()

    assert data['mode'] == 'embedded_video_platform'
    assert data['externalUrl'] == 'https://www.youtube.com/watch?v=8bYKwZ6b8yQ'
    assert data['streamUrl'] == 'https://www.youtube.com/watch?v=8bYKwZ6b8yQ'


def test_unknown_channel_is_404(client):
    response = client.get('/api/channels/nope')

    assert response.status_code == 404
    assert "nope" in response.get_json()['error']


def test_play_then_rate_then_close(client, catalog, stream_clients):
    status = client.post('/api/channels/settv/play').get_json()

    assert status['state'] == 'acquiring'
    assert catalog.get('settv').view_count == 1

    stream_clients.last.ready()
    assert client.get('/api/session').get_json()['state'] == 'playing'

    rated = client.post('/api/session/rating', json={'rating': 4}).get_json()
    assert rated['rating'] == 4
    assert catalog.get('settv').rating == 4

    client.post('/api/session/close')
    assert client.get('/api/session').get_json()['state'] == 'closed'
    assert stream_clients.released == 1


def test_playing_another_channel_closes_the_first(client, stream_clients):
    client.post('/api/channels/settv/play')
    client.post('/api/channels/tv2000/play')

    assert stream_clients.clients[0].destroyed
    assert client.get('/api/session').get_json()['channel_id'] == 'tv2000'


def test_fatal_stream_error_is_reported(client, stream_clients):
    client.post('/api/channels/settv/play')
    stream_clients.last.fail("manifestLoadError")

    status = client.get('/api/session').get_json()

    assert status['state'] == 'error'
    assert status['retry_url'] == 'https://stream.settv.it/hls/settv/index.m3u8'


def test_rating_without_session(client):
    assert client.post('/api/session/rating', json={'rating': 3}).status_code == 400


def test_invalid_rating(client):
    client.post('/api/channels/rainews24/play')

    assert client.post('/api/session/rating', json={'rating': 7}).status_code == 400


def test_history_lists_sessions(client):
    client.post('/api/channels/rainews24/play')

    history = client.get('/api/history').get_json()

    assert history[0]['channel_id'] == 'rainews24'
    assert history[0]['status'] == 'playing'


def test_admin_routes_require_login(client):
    response = client.post('/api/admin/channels', json={'name': 'X', 'streamUrl': 'https://x.it/a.m3u8'})

    assert response.status_code == 403
    assert client.delete('/api/admin/channels/settv').status_code == 403


def test_wrong_password(client):
    assert client.post('/api/admin/login', json={'password': 'nope'}).status_code == 401
    assert client.post('/api/admin/login', json={}).status_code == 401


def test_admin_add_update_delete(admin, catalog):
    created = admin.post('/api/admin/channels', json={
        'name': 'Canale 21',
        'streamUrl': 'https://www.canale21.it/live/index.m3u8',
        'category': 'Regionali',
    })
    assert created.status_code == 201
    channel = created.get_json()
    assert channel['isUserAdded'] is True
    assert channel['mode'] == 'adaptive_stream'

    updated = admin.put(f"/api/admin/channels/{channel['id']}", json={
        'name': 'Canale 21 HD',
        'streamUrl': channel['streamUrl'],
        'order': 4,
    }).get_json()
    assert updated['name'] == 'Canale 21 HD'
    assert updated['order'] == 4

    assert admin.delete(f"/api/admin/channels/{channel['id']}").status_code == 200
    assert catalog.find(channel['id']) is None


def test_admin_validation_error(admin):
    response = admin.post('/api/admin/channels', json={'name': 'Senza stream'})

    assert response.status_code == 400


def test_logout_closes_gate(admin):
    admin.post('/api/admin/logout')

    assert admin.delete('/api/admin/channels/settv').status_code == 403


def test_recommend_requires_query(client):
    assert client.post('/api/recommend', json={'query': '  '}).status_code == 400


def test_recommend(client):
    with patch.object(web, 'recommend', return_value=Recommendation("Guarda Rai News", ['rainews24'])) as mocked:
        data = client.post('/api/recommend', json={'query': 'notizie'}).get_json()

    assert data == {'text': "Guarda Rai News", 'channel_ids': ['rainews24']}
    assert mocked.call_args[0][0] == 'notizie'


def test_channel_news(client):
    item = NewsItem("Titolo", "https://stiletv.it/a", "2024-05-01", "Testo...")
    with patch.object(web, 'fetch_feed', return_value=[item]) as mocked:
        data = client.get('/api/channels/stiletv/news').get_json()

    assert data == [item._asdict()]
    assert mocked.call_args[0][0]


def test_ticker_without_scheduler(client):
    assert client.get('/api/ticker').get_json() == {'current': None, 'items': []}


def test_ticker_reports_rotating_item(catalog):
    items = [TickerItem("Ultim'ora", "", "#ff0000", ""), TickerItem("Meteo", "", "#00ff00", "")]
    ticker = TickerScheduler(fetch=lambda: items)
    ticker.refresh()
    web.set_services(catalog, ticker=ticker)

    with web.app.test_client() as client:
        first = client.get('/api/ticker').get_json()
        ticker.advance()
        second = client.get('/api/ticker').get_json()

    assert first['items'] == [item._asdict() for item in items]
    assert first['current']['title'] == "Ultim'ora"
    assert second['current']['title'] == "Meteo"


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))
