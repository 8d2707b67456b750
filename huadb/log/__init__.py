"""Write-ahead log records, their binary encoding, and the log manager."""