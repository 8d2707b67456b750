"""Transaction ids, snapshots and lock management."""