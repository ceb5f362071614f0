# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Runs one full aggregation cycle against the node and publishes the
resulting snapshot.
"""

from .blockversions import BlockVersionWindow
from .node import FetchError
from .quorum import QuorumEvaluator
from .snapshot import ConsensusSnapshot, SnapshotHolder
from .stakeversions import INTERVALS_TO_CHECK, IntervalVoteTally

import logging


class StatusAggregator:
  """
  Combines the block-version, stake-version and quorum computations into
  consensus snapshots.  Each call to update either publishes a complete
  new snapshot or leaves the previous one in place.
  """

  def __init__ (self, node, config, holder=None):
    self.log = logging.getLogger ("upgradestatus.aggregator")
    self.node = node
    self.config = config
    self.holder = holder if holder is not None else SnapshotHolder ()

    self.blockVersions = BlockVersionWindow (config)
    self.stakeVersions = IntervalVoteTally (config)
    self.quorum = QuorumEvaluator (node)

  def buildSnapshot (self, previous=None):
    """
    Fetches all data from the node and builds a new snapshot.  Returns None
    if the cycle terminates early without a result.  FetchError and
    ValueError are passed on to the caller.
    """

    blockHash, height = self.node.getTip ()
    header = self.node.getHeader (blockHash)
    self.log.info ("Updating status for block %d (%s)" % (height, blockHash))

    window = self.config.blockVersionWindowLength
    records = self.node.getVersionRecords (blockHash, 2 * window)
    fields = self.blockVersions.compute (records)

    intervalRecords = self.node.getVersionRecords (
        blockHash, self.stakeVersions.blocksIntoInterval (height))
    buckets = self.node.getIntervalBuckets (INTERVALS_TO_CHECK)
    stake = self.stakeVersions.compute (buckets=buckets,
                                        intervalRecords=intervalRecords,
                                        stakeVersion=header["stakeVersion"])
    if stake is None:
      return None
    fields.update (stake)

    fields.update (self.quorum.compute (stake["stakeVersionMostPopular"],
                                        previous))

    return ConsensusSnapshot (thresholds=self.config, blockHeight=height,
                              **fields)

  def update (self):
    """
    Runs one cycle and publishes its result.  Returns True if a new
    snapshot was published.
    """

    try:
      snapshot = self.buildSnapshot (self.holder.get ())
    except FetchError as exc:
      self.log.warning ("Fetching data from the node failed: %s" % exc)
      return False
    except ValueError as exc:
      self.log.warning ("Unusable data from the node: %s" % exc)
      return False

    if snapshot is None:
      self.log.info ("No status update this time")
      return False

    self.holder.publish (snapshot)
    self.log.info ("Published status for height %d" % snapshot.blockHeight)
    return True
