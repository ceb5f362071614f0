# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""Shared fixtures:  a fake node RPC and small test networks."""

from jsonrpclib.jsonrpc import ProtocolError
import pytest

from upgradestatus.node import NodeClient, VersionRecord
from upgradestatus.params import NetworkParams, ThresholdConfig


def makeParams (**overrides):
  """
  Returns parameters of a tiny network:  a block-version window of 4,
  stake-version intervals of 10 blocks and 5 tickets per block.
  """

  values = {
    "name": "unittest",
    "blockEnforceNumRequired": 3,
    "blockRejectNumRequired": 4,
    "blockUpgradeNumToCheck": 4,
    "stakeVersionInterval": 10,
    "stakeMajorityMultiplier": 3,
    "stakeMajorityDivisor": 4,
    "ruleChangeActivationQuorum": 10,
    "ruleChangeActivationInterval": 20,
    "ticketsPerBlock": 5,
    "stakeValidationHeight": 2,
  }
  values.update (overrides)
  return NetworkParams (**values)


def recordsJson (blockVersions, tipHeight, stakeVersion=1, votes=5):
  """
  Builds getstakeversions entries for the given block versions, which
  are ordered newest first like the node returns them.
  """

  return [
    {
      "hash": "%064x" % (tipHeight - i),
      "height": tipHeight - i,
      "blockversion": v,
      "stakeversion": stakeVersion,
      "votes": [{"version": stakeVersion, "bits": 1}] * votes,
    }
    for i, v in enumerate (blockVersions)
  ]


def records (blockVersions, tipHeight=100):
  return [VersionRecord.fromJson (d)
          for d in recordsJson (blockVersions, tipHeight)]


class FakeRpc:
  """
  Stands in for the jsonrpclib proxy.  The answers are taken from the
  attributes, which tests can change as needed.  Methods whose names are
  in "failing" raise ProtocolError.
  """

  def __init__ (self):
    self.tipHash = "%064x" % 25
    self.height = 25
    self.stakeVersion = 4
    self.records = recordsJson ([5, 5, 4, 4, 4, 4, 4, 4], self.height,
                                stakeVersion=4)
    # The blocks so far in the running interval miss two votes.
    self.records[0]["votes"] = self.records[0]["votes"][:4]
    self.records[1]["votes"] = self.records[1]["votes"][:4]
    self.intervals = [
      {"startheight": 22, "endheight": 25,
       "voteversions": [{"version": 4, "count": 5}, {"version": 5, "count": 40}]},
      {"startheight": 12, "endheight": 22,
       "voteversions": [{"version": 4, "count": 300}, {"version": 5, "count": 150}]},
      {"startheight": 2, "endheight": 12,
       "voteversions": [{"version": 4, "count": 450}]},
    ]
    self.voteInfo = {
      "currentheight": 25,
      "startheight": 0,
      "endheight": 100,
      "hash": self.tipHash,
      "voteversion": 5,
      "quorum": 10,
      "totalvotes": 12,
      "agendas": [
        {
          "id": "newrule",
          "description": "Enable the new rule",
          "mask": 6,
          "starttime": 0,
          "expiretime": 86400,
          "status": "started",
          "quorumprogress": 0.87345,
          "choices": [
            {"id": "abstain", "isabstain": True, "isno": False,
             "count": 2, "progress": 0.25},
            {"id": "no", "isabstain": False, "isno": True,
             "count": 1, "progress": 0.125},
            {"id": "yes", "isabstain": False, "isno": False,
             "count": 5, "progress": 0.625},
          ],
        },
      ],
    }
    self.failing = set ()
    self.calls = []

  def _call (self, method, *args):
    self.calls.append ((method,) + args)
    if method in self.failing:
      raise ProtocolError ((-1, "%s failed" % method))

  def getbestblock (self):
    self._call ("getbestblock")
    return {"hash": self.tipHash, "height": self.height}

  def getblockheader (self, blockHash, verbose):
    self._call ("getblockheader", blockHash, verbose)
    return {"hash": blockHash, "height": self.height,
            "stakeversion": self.stakeVersion}

  def getstakeversions (self, blockHash, count):
    self._call ("getstakeversions", blockHash, count)
    return {"stakeversions": self.records[:count]}

  def getstakeversioninfo (self, count):
    self._call ("getstakeversioninfo", count)
    return {"currentheight": self.height, "hash": self.tipHash,
            "intervals": self.intervals[:count]}

  def getvoteinfo (self, version):
    self._call ("getvoteinfo", version)
    return self.voteInfo


@pytest.fixture
def rpc ():
  return FakeRpc ()


@pytest.fixture
def node (rpc):
  return NodeClient (rpc)


@pytest.fixture
def config ():
  return ThresholdConfig (makeParams ())
