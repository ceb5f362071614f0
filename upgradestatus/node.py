# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Access to the node's JSON-RPC interface.  Only the handful of calls
needed for tracking upgrade votes are wrapped, and their results are
turned into small record objects.
"""

from jsonrpclib.jsonrpc import ProtocolError
import jsonrpclib

import http.client
import logging
import ssl


class FetchError (Exception):
  """
  Raised when a call to the node fails for whatever reason (connection
  problems, RPC errors or an unexpected response).
  """


class VersionRecord:
  """
  The versions reported by a single block.
  """

  def __init__ (self, *, height, blockVersion, stakeVersion, votes,
                blockHash=None):
    self.height = height
    self.blockHash = blockHash
    self.blockVersion = blockVersion
    self.stakeVersion = stakeVersion
    self.votes = votes

  @classmethod
  def fromJson (cls, data):
    return cls (height=data["height"], blockHash=data.get ("hash"),
                blockVersion=data["blockversion"],
                stakeVersion=data["stakeversion"],
                votes=list (data.get ("votes") or []))

  def __repr__ (self):
    return "VersionRecord (height=%d, blockVersion=%d, stakeVersion=%d)" \
        % (self.height, self.blockVersion, self.stakeVersion)


class IntervalBucket:
  """
  Vote version counts of one stake-version interval.  voteCounts is a list
  of (version, count) pairs in the order the node returned them.
  """

  def __init__ (self, *, startHeight, endHeight, voteCounts):
    self.startHeight = startHeight
    self.endHeight = endHeight
    self.voteCounts = voteCounts

  @classmethod
  def fromJson (cls, data):
    counts = [(v["version"], v["count"])
              for v in data.get ("voteversions") or []]
    return cls (startHeight=data["startheight"], endHeight=data["endheight"],
                voteCounts=counts)

  def toJson (self):
    return {
      "startheight": self.startHeight,
      "endheight": self.endHeight,
      "voteversions": [{"version": v, "count": c} for v, c in self.voteCounts],
    }


class NodeClient:
  """
  Thin wrapper around a JSON-RPC proxy for the node.  All failures of the
  underlying proxy are converted to FetchError.
  """

  def __init__ (self, rpc):
    self.log = logging.getLogger ("upgradestatus.node")
    self.rpc = rpc

  @classmethod
  def fromUrl (cls, url, certFile=None):
    """
    Connects to the given URL.  If certFile is set, the node's TLS
    certificate (e.g. a self-signed rpc.cert) is trusted for https.
    """

    context = None
    if certFile is not None:
      context = ssl.create_default_context (cafile=certFile)
    return cls (jsonrpclib.ServerProxy (url, context=context))

  def call (self, method, *args):
    self.log.debug ("Calling %s%s" % (method, args))
    try:
      return getattr (self.rpc, method) (*args)
    except (ProtocolError, OSError, http.client.HTTPException) as exc:
      raise FetchError ("%s failed: %s" % (method, exc)) from exc

  def getTip (self):
    """
    Returns the hash and height of the current best block.
    """

    data = self.call ("getbestblock")
    try:
      return data["hash"], data["height"]
    except (KeyError, TypeError) as exc:
      raise FetchError ("unexpected getbestblock result: %r" % data) from exc

  def getHeader (self, blockHash):
    data = self.call ("getblockheader", blockHash, True)
    try:
      return {
        "height": data["height"],
        "stakeVersion": data["stakeversion"],
      }
    except (KeyError, TypeError) as exc:
      raise FetchError ("unexpected block header: %r" % data) from exc

  def getVersionRecords (self, blockHash, count):
    """
    Returns the version records of count blocks ending at the given
    block, newest first.
    """

    if count <= 0:
      return []

    data = self.call ("getstakeversions", blockHash, count)
    try:
      return [VersionRecord.fromJson (d) for d in data["stakeversions"]]
    except (KeyError, TypeError) as exc:
      raise FetchError ("unexpected getstakeversions result") from exc

  def getIntervalBuckets (self, intervalsBack):
    """
    Returns the vote counts of the last intervals, newest (running)
    interval first.
    """

    data = self.call ("getstakeversioninfo", intervalsBack)
    try:
      return [IntervalBucket.fromJson (d) for d in data["intervals"] or []]
    except (KeyError, TypeError) as exc:
      raise FetchError ("unexpected getstakeversioninfo result") from exc

  def getAgendaInfo (self, stakeVersion):
    """
    Returns the raw getvoteinfo result for a vote version.
    """

    data = self.call ("getvoteinfo", stakeVersion)
    if not isinstance (data, dict):
      raise FetchError ("unexpected getvoteinfo result: %r" % data)
    return data
