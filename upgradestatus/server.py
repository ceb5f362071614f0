# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Read-only HTTP interface serving the current status snapshot as JSON.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse


def createApp (holder):
  """
  Builds the web app reading snapshots from the given SnapshotHolder.
  """

  app = FastAPI (title="Upgrade Status")

  @app.get ("/")
  @app.get ("/status")
  def status ():
    snapshot = holder.get ()
    if snapshot is None:
      return JSONResponse ({"error": "status not yet available"},
                           status_code=503)
    return JSONResponse (snapshot.toJson ())

  return app
