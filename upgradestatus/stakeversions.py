# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Tallies of stake (vote) versions per stake-version interval.
"""

from .util import percentage

from types import MappingProxyType
import logging

# Vote versions need more than this many votes in some interval before
# they are shown at all.  This keeps stray votes out of the charts.
MIN_VOTE_SUPPORT = 100

# Number of intervals requested from the node, including the running one.
INTERVALS_TO_CHECK = 4

CURRENT_INTERVAL_LABEL = "Current Interval"


def buildIntervalSeries (buckets, minSupport=MIN_VOTE_SUPPORT):
  """
  Turns interval buckets (oldest first) into per-version count series.
  A version is tracked from the first interval in which its count exceeds
  minSupport; from then on its actual count is recorded for every
  interval.  Entries before that stay zero.

  Returns the list of (version, counts) pairs in the order in which the
  versions started to be tracked, and the labels for the intervals.  The
  label of the last (running) interval is CURRENT_INTERVAL_LABEL.
  """

  num = len (buckets)
  series = {}
  labels = []

  for i, b in enumerate (buckets):
    labels.append ("%d - %d" % (b.startHeight, b.endHeight))
    for version, count in b.voteCounts:
      if version in series:
        series[version][i] = count
      elif count > minSupport:
        series[version] = [0] * num
        series[version][i] = count

  if labels:
    labels[-1] = CURRENT_INTERVAL_LABEL

  return [(v, tuple (c)) for v, c in series.items ()], labels


def countMissedVotes (records, ticketsPerBlock):
  """
  Counts the votes missed in the given blocks.
  """

  return sum (ticketsPerBlock - len (r.votes) for r in records)


def mostPopularVersion (voteCounts, activeVersion):
  """
  Finds the vote version with most votes among those strictly above the
  currently active stake version.  Returns (0, 0) if there is none.
  """

  best = 0
  bestCount = 0
  for version, count in sorted (voteCounts):
    if version > activeVersion and count > bestCount:
      best = version
      bestCount = count

  return best, bestCount


class IntervalVoteTally:
  """
  Computes the stake-version part of the status snapshot.
  """

  def __init__ (self, config):
    self.log = logging.getLogger ("upgradestatus.stakeversions")
    self.config = config

  def blocksIntoInterval (self, height):
    return ((height - self.config.stakeValidationHeight)
              % self.config.stakeVersionWindowLength)

  def compute (self, *, buckets, intervalRecords, stakeVersion):
    """
    Processes interval buckets (as returned by the node, newest first),
    the version records of the blocks so far in the running interval and
    the stake version of the tip header.  Returns the snapshot fields as
    dict, or None if there are no intervals at all.
    """

    if not buckets:
      self.log.warning ("Stake version info did not return any intervals")
      return None

    current = buckets[0]
    series, labels = buildIntervalSeries (list (reversed (buckets)))

    tickets = self.config.ticketsPerBlock
    interval = self.config.stakeVersionWindowLength

    missed = countMissedVotes (intervalRecords, tickets)
    maxPossibleVotes = interval * tickets - missed

    popVersion, popCount = mostPopularVersion (current.voteCounts,
                                               stakeVersion)
    if maxPossibleVotes > 0:
      popPercentage = percentage (popCount, maxPossibleVotes)
    else:
      popPercentage = 0.0

    required = (maxPossibleVotes * self.config.stakeMajorityMultiplier
                  // self.config.stakeMajorityDivisor)

    blocksIn = current.endHeight - current.startHeight
    votesRemaining = (interval - blocksIn) * tickets

    self.log.debug ("Most popular vote version %d with %d votes"
                      % (popVersion, popCount))

    return {
      "stakeVersionsIntervals":
          tuple (MappingProxyType (b.toJson ()) for b in buckets),
      "stakeVersionIntervalLabels": tuple (labels),
      "stakeVersionIntervalResults": tuple (series),
      "stakeVersionWindowVoteTotal": maxPossibleVotes,
      "stakeVersionCurrent": stakeVersion,
      "stakeVersionMostPopular": popVersion,
      "stakeVersionMostPopularCount": popCount,
      "stakeVersionMostPopularPercentage": popPercentage,
      "stakeVersionRequiredVotes": required,
      "stakeVersionSuccess": popCount > required,
      "stakeVersionVotesRemaining": votesRemaining,
    }
