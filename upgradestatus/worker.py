# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Triggering of aggregation cycles:  Block notifications from the node's
ZMQ interface are put into a bounded queue, from which a single worker
thread picks them up and runs one cycle at a time.
"""

import zmq

import codecs
import logging
import queue
import struct
import threading

BLOCK_TOPIC = "hashblock"


class TriggerQueue:
  """
  Bounded queue of pending triggers.  Adding never blocks; if the queue is
  full, there are enough pending triggers already and the new one is
  dropped.
  """

  def __init__ (self, size=100):
    self.log = logging.getLogger ("upgradestatus.worker")
    self.queue = queue.Queue (maxsize=size)

  def put (self, trigger):
    try:
      self.queue.put_nowait (trigger)
    except queue.Full:
      self.log.debug ("Trigger queue full, dropping %r" % (trigger,))

  def get (self, timeout=None):
    """
    Waits for the next trigger and returns it together with all others
    that are pending right now, as list.  Returns an empty list if the
    timeout expires.
    """

    try:
      triggers = [self.queue.get (timeout=timeout)]
    except queue.Empty:
      return []

    while True:
      try:
        triggers.append (self.queue.get_nowait ())
      except queue.Empty:
        return triggers


class UpdateWorker (threading.Thread):
  """
  The thread running aggregation cycles.  It runs one cycle at startup and
  then one per batch of triggers, until stop is called.  If pollInterval
  is set, a cycle is also run whenever that many seconds pass without
  any trigger.
  """

  STOP = "stop"

  def __init__ (self, aggregator, triggers, pollInterval=None):
    super ().__init__ (name="update-worker", daemon=True)
    self.log = logging.getLogger ("upgradestatus.worker")
    self.aggregator = aggregator
    self.triggers = triggers
    self.pollInterval = pollInterval
    self.stopped = threading.Event ()

  def stop (self):
    self.stopped.set ()
    self.triggers.put (self.STOP)

  def runCycle (self):
    """
    Runs one aggregation cycle.  Unexpected errors are logged, so that the
    next trigger can retry.
    """

    try:
      self.aggregator.update ()
    except Exception:
      self.log.exception ("Status update failed")

  def run (self):
    self.log.info ("Running initial status update")
    self.runCycle ()

    while not self.stopped.is_set ():
      batch = self.triggers.get (timeout=self.pollInterval)
      if self.stopped.is_set ():
        break

      batch = [t for t in batch if t != self.STOP]
      if batch:
        self.log.info ("Got %d block notification(s), latest %s"
                          % (len (batch), batch[-1]))
      elif self.pollInterval is None:
        continue
      else:
        self.log.debug ("No blocks for %d seconds" % self.pollInterval)

      self.runCycle ()

    self.log.info ("Update worker stopped")


class BlockNotifier (threading.Thread):
  """
  Subscribes to the node's "hashblock" ZMQ notifications and puts the
  hashes of new blocks into the trigger queue.
  """

  def __init__ (self, ctx, addr, triggers, timeout=1000):
    super ().__init__ (name="block-notifier", daemon=True)
    self.log = logging.getLogger ("upgradestatus.worker")
    self.triggers = triggers
    self.stopped = threading.Event ()

    self.socket = ctx.socket (zmq.SUB)
    self.socket.set (zmq.RCVTIMEO, timeout)
    self.socket.connect (addr)
    self.socket.setsockopt_string (zmq.SUBSCRIBE, BLOCK_TOPIC)
    self.log.info ("Subscribed to block notifications at %s" % addr)

  def stop (self):
    self.stopped.set ()

  def receive (self):
    """
    Waits for the next notification and returns the block hash in it, or
    None if nothing arrived before the timeout.
    """

    try:
      topic, body, seq = self.socket.recv_multipart ()
    except zmq.error.Again:
      return None

    topic = codecs.decode (topic, "ascii")
    if topic != BLOCK_TOPIC:
      self.log.warning ("Ignoring message with topic %s" % topic)
      return None

    seqNum = struct.unpack ("<I", seq)[-1]
    self.log.debug ("Block notification #%d" % seqNum)

    return codecs.encode (body, "hex").decode ("ascii")

  def run (self):
    try:
      while not self.stopped.is_set ():
        blockHash = self.receive ()
        if blockHash is not None:
          self.triggers.put (blockHash)
    finally:
      self.socket.close (linger=0)
