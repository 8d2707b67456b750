"""Record headers and slotted table page views."""