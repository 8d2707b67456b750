"""Pages, disk access, buffer replacement strategies and the buffer pool."""