# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
The published status snapshot and the holder through which it is
replaced and read.
"""

import threading

FIELDS = [
  "blockHeight",

  "blockVersionsHeights",
  "blockVersions",
  "blockVersionCurrent",
  "blockVersionMostPopular",
  "blockVersionMostPopularPercentage",
  "blockVersionNext",
  "blockVersionNextPercentage",
  "blockVersionSuccess",

  "stakeVersionsIntervals",
  "stakeVersionIntervalLabels",
  "stakeVersionIntervalResults",
  "stakeVersionWindowVoteTotal",
  "stakeVersionCurrent",
  "stakeVersionMostPopular",
  "stakeVersionMostPopularCount",
  "stakeVersionMostPopularPercentage",
  "stakeVersionRequiredVotes",
  "stakeVersionSuccess",
  "stakeVersionVotesRemaining",

  "quorum",
  "lockedinPercentage",
  "voteInfo",
  "agendas",
]


class ConsensusSnapshot:
  """
  One complete result of an aggregation cycle.  All fields must be given
  on construction, and the object cannot be modified afterwards.
  """

  def __init__ (self, *, thresholds, **kwargs):
    missing = [f for f in FIELDS if f not in kwargs]
    if missing:
      raise TypeError ("missing snapshot fields: %s" % ", ".join (missing))
    unknown = [f for f in kwargs if f not in FIELDS]
    if unknown:
      raise TypeError ("unknown snapshot fields: %s" % ", ".join (unknown))

    object.__setattr__ (self, "thresholds", thresholds)
    for f in FIELDS:
      object.__setattr__ (self, f, kwargs[f])

  def __setattr__ (self, name, value):
    raise AttributeError ("ConsensusSnapshot is immutable")

  def __eq__ (self, other):
    if not isinstance (other, ConsensusSnapshot):
      return NotImplemented
    return self.toJson () == other.toJson ()

  def toJson (self):
    """
    Returns the snapshot as plain JSON-serialisable dict.
    """

    res = self.thresholds.toJson ()
    for f in FIELDS:
      res[f] = getattr (self, f)

    res["blockVersionsHeights"] = list (self.blockVersionsHeights)
    res["blockVersions"] = {str (v): list (c)
                            for v, c in self.blockVersions.items ()}
    res["stakeVersionsIntervals"] = [dict (b)
                                     for b in self.stakeVersionsIntervals]
    res["stakeVersionIntervalLabels"] = list (self.stakeVersionIntervalLabels)
    res["stakeVersionIntervalResults"] = [
      {"version": v, "count": list (c)}
      for v, c in self.stakeVersionIntervalResults
    ]
    if self.voteInfo is not None:
      res["voteInfo"] = dict (self.voteInfo)
    res["agendas"] = [a.toJson () for a in self.agendas]

    return res


class SnapshotHolder:
  """
  Holds the currently published snapshot.  A new snapshot replaces the
  old one as a whole; readers get whichever was published last.
  """

  def __init__ (self):
    self.lock = threading.Lock ()
    self.snapshot = None

  def publish (self, snapshot):
    with self.lock:
      self.snapshot = snapshot

  def get (self):
    """
    Returns the current snapshot, or None before the first successful
    aggregation cycle.
    """

    with self.lock:
      return self.snapshot
