from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def build_http_session(pool_maxsize: int = 10) -> requests.Session:
    """Return a requests session whose adapter never retries on its own.

    Retries and token refresh are handled by ``rhsys.dispatch``.
    """
    sess = requests.Session()
    retries = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retries, pool_maxsize=pool_maxsize)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess
