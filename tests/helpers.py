import json


def get_token(client):
    return client.get('/api/csrf-token').get_json()['csrf_token']


class FakeResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)


class FlaskTestSession:
    """Stands in for requests.Session, routing calls to a Flask test client."""

    def __init__(self, client):
        self.client = client
        self.calls = []

    def request(self, method, url, timeout=None, params=None, data=None, headers=None):
        self.calls.append({'method': method, 'url': url, 'timeout': timeout})
        resp = self.client.open(url, method=method, query_string=params, data=data, headers=headers)
        return FakeResponse(resp.status_code, resp.get_data(as_text=True))


class FakeTimer:
    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.fn()
