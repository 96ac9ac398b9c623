"""vRPA Manager: device checkout, scheduling and reachability tracking"""
