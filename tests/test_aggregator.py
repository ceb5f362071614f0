# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""Tests full aggregation cycles against the fake node."""

import json

import pytest

from upgradestatus.aggregator import StatusAggregator


@pytest.fixture
def aggregator (node, config):
  return StatusAggregator (node, config)


def test_full_cycle (aggregator):
  assert aggregator.holder.get () is None
  assert aggregator.update ()

  snap = aggregator.holder.get ()
  assert snap.blockHeight == 25

  assert snap.blockVersionsHeights == (22, 23, 24, 25)
  assert snap.blockVersions == {4: (4, 4, 3, 2), 5: (0, 0, 1, 2)}
  assert snap.blockVersionCurrent == 4
  assert snap.blockVersionMostPopular == 5
  assert snap.blockVersionMostPopularPercentage == 50.0
  assert snap.blockVersionNext == 5
  assert snap.blockVersionNextPercentage == 50.0
  assert not snap.blockVersionSuccess

  assert snap.stakeVersionIntervalResults == ((4, (450, 300, 5)),
                                              (5, (0, 150, 40)))
  assert snap.stakeVersionWindowVoteTotal == 48
  assert snap.stakeVersionCurrent == 4
  assert snap.stakeVersionMostPopular == 5
  assert snap.stakeVersionMostPopularCount == 40
  assert snap.stakeVersionRequiredVotes == 36
  assert snap.stakeVersionSuccess
  assert snap.stakeVersionVotesRemaining == 35

  assert snap.quorum
  assert snap.lockedinPercentage == 75.0
  assert len (snap.agendas) == 1
  assert snap.agendas[0].quorumVotedPercentage == 87.35


def test_requested_ranges (rpc, aggregator):
  aggregator.update ()
  assert ("getstakeversions", rpc.tipHash, 8) in rpc.calls
  assert ("getstakeversions", rpc.tipHash, 3) in rpc.calls
  assert ("getstakeversioninfo", 4) in rpc.calls
  assert ("getvoteinfo", 5) in rpc.calls


def test_idempotent (aggregator):
  first = aggregator.buildSnapshot ()
  second = aggregator.buildSnapshot ()
  assert first is not second
  assert first == second
  assert json.dumps (first.toJson (), sort_keys=True) \
      == json.dumps (second.toJson (), sort_keys=True)


def test_snapshot_immutable (aggregator):
  aggregator.update ()
  snap = aggregator.holder.get ()
  with pytest.raises (AttributeError):
    snap.quorum = False


def test_to_json (aggregator):
  aggregator.update ()
  data = json.loads (json.dumps (aggregator.holder.get ().toJson ()))
  assert data["blockVersions"] == {"4": [4, 4, 3, 2], "5": [0, 0, 1, 2]}
  assert data["stakeVersionIntervalLabels"][-1] == "Current Interval"
  assert data["stakeVersionIntervalResults"][1] \
      == {"version": 5, "count": [0, 150, 40]}
  assert data["agendas"][0]["choicePercentages"] == [0.0, 12.5, 62.5]
  assert data["blockVersionEnforceThreshold"] == 75
  assert data["quorumThreshold"] == 10.0


@pytest.mark.parametrize ("method", [
  "getbestblock",
  "getblockheader",
  "getstakeversions",
  "getstakeversioninfo",
])
def test_fetch_error_keeps_snapshot (rpc, aggregator, method):
  assert aggregator.update ()
  before = aggregator.holder.get ()

  rpc.failing.add (method)
  rpc.height = 26
  assert not aggregator.update ()
  assert aggregator.holder.get () is before


def test_connection_error (rpc, aggregator):
  def refuse ():
    raise ConnectionRefusedError ("node is down")
  rpc.getbestblock = refuse

  assert not aggregator.update ()
  assert aggregator.holder.get () is None


def test_no_intervals (rpc, aggregator):
  rpc.intervals = []
  assert not aggregator.update ()
  assert aggregator.holder.get () is None


def test_young_chain (rpc, aggregator):
  rpc.records = rpc.records[:5]
  assert not aggregator.update ()
  assert aggregator.holder.get () is None


def test_vote_info_error_keeps_agendas (rpc, aggregator):
  assert aggregator.update ()
  before = aggregator.holder.get ()

  rpc.failing.add ("getvoteinfo")
  rpc.intervals[0]["voteversions"][1]["count"] = 45
  assert aggregator.update ()

  snap = aggregator.holder.get ()
  assert snap is not before
  assert snap.stakeVersionMostPopularCount == 45
  assert not snap.quorum
  assert snap.agendas is before.agendas
  assert snap.lockedinPercentage == before.lockedinPercentage


def test_no_upgrade_candidate (rpc, aggregator):
  rpc.stakeVersion = 5
  assert aggregator.update ()

  snap = aggregator.holder.get ()
  assert snap.stakeVersionMostPopular == 0
  assert not snap.quorum
  assert snap.agendas == ()
  assert not any (c[0] == "getvoteinfo" for c in rpc.calls)


def test_unformattable_expire_time (rpc, aggregator):
  assert aggregator.update ()
  before = aggregator.holder.get ()

  rpc.voteInfo["agendas"][0]["expiretime"] = 2**64 - 1
  assert not aggregator.update ()
  assert aggregator.holder.get () is before


def test_nested_fields_read_only (aggregator):
  aggregator.update ()
  snap = aggregator.holder.get ()
  with pytest.raises (TypeError):
    snap.blockVersions[4] = (0, 0, 0, 0)
  with pytest.raises (TypeError):
    snap.voteInfo["quorum"] = 0
  with pytest.raises (TypeError):
    snap.stakeVersionsIntervals[0]["startheight"] = 0
  assert snap.toJson ()["voteInfo"]["totalVotes"] == 12
