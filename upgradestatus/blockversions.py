# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Adoption of block versions over a rolling window of recent blocks.
"""

from .util import percentage

from types import MappingProxyType
import logging


def buildRollingWindow (records, windowLength):
  """
  Builds the rolling-window histogram from 2 * windowLength version
  records (newest first).  For each of the windowLength anchor blocks,
  the block versions of the windowLength blocks ending at the anchor are
  counted.

  Returns a dict mapping each block version to its list of counts (one per
  anchor, oldest anchor first) and the list of anchor heights in the
  same order.
  """

  if len (records) < 2 * windowLength:
    raise ValueError ("need %d version records, got %d"
                        % (2 * windowLength, len (records)))

  versions = {}
  heights = [0] * windowLength

  # The records are ordered newest first, so the oldest anchor sits
  # just before the middle of the list.
  for slot in range (windowLength):
    anchor = windowLength - 1 - slot
    heights[slot] = records[anchor].height
    for r in records[anchor:anchor + windowLength]:
      if r.blockVersion not in versions:
        versions[r.blockVersion] = [0] * windowLength
      versions[r.blockVersion][slot] += 1

  return {v: versions[v] for v in sorted (versions)}, heights


def tallyVersions (records):
  counts = {}
  for r in records:
    counts[r.blockVersion] = counts.get (r.blockVersion, 0) + 1
  return counts


class BlockVersionWindow:
  """
  Computes the block-version part of the status snapshot.
  """

  def __init__ (self, config):
    self.log = logging.getLogger ("upgradestatus.blockversions")
    self.config = config

  def compute (self, records):
    """
    Processes the newest 2 * W version records and returns the resulting
    snapshot fields as dict.
    """

    window = self.config.blockVersionWindowLength
    versions, heights = buildRollingWindow (records, window)

    counts = tallyVersions (records[:window])
    current = min (counts)

    # Ties go to the lowest version.
    popVersion = 0
    popCount = -1
    for v in sorted (counts):
      if v != current and counts[v] > popCount:
        popVersion = v
        popCount = counts[v]
    popCount = max (popCount, 0)

    nextVersion = current + 1
    self.log.debug ("Block versions in window: %r" % counts)

    return {
      "blockVersionsHeights": tuple (heights),
      "blockVersions":
          MappingProxyType ({v: tuple (c) for v, c in versions.items ()}),
      "blockVersionCurrent": current,
      "blockVersionMostPopular": popVersion,
      "blockVersionMostPopularPercentage": percentage (popCount, window),
      "blockVersionNext": nextVersion,
      "blockVersionNextPercentage":
          percentage (counts.get (nextVersion, 0), window),
      "blockVersionSuccess": popCount > self.config.blockEnforceNumRequired,
    }
